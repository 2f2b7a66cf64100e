"""Entry point for running rpcdoc as a module.

Usage:
    python -m rpcdoc [command] [options]

Example:
    python -m rpcdoc generate --output docs/SERVICES.md
    python -m rpcdoc check
"""

from rpcdoc.cli import app

if __name__ == "__main__":
    app()
