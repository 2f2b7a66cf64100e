"""rpcdoc - Service specification generator.

rpcdoc walks the metadata of RPC service interfaces (Thrift-style structs,
enums, exceptions, typedefs and containers) and produces one normalized
ServiceSpecification: every bound service with its functions, the named
types they reach, and the endpoints serving them.

Core guarantees:
- Every named type appears once, keyed by its qualified name
- Recursive types terminate through named placeholders
- Same metadata in, same specification out
"""

__version__ = "0.1.0"
