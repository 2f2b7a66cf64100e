"""Class collector: gathers the named types reachable from a type graph.

Children are collected before their parent, so nested dependencies appear
first in discovery order. Deduplication is by qualified name: the first
occurrence wins, and a later occurrence with a different definition raises
DuplicateQualifiedNameConflict. Unresolved placeholders are never collected.
"""

from collections.abc import Iterable

from rpcdoc.errors import DuplicateQualifiedNameConflict
from rpcdoc.models.specification import FunctionInfo
from rpcdoc.models.types import ClassInfo, CollectionInfo, MapInfo, TypeInfo


class ClassCollector:
    """Accumulates ClassInfo values keyed by qualified name."""

    def __init__(self) -> None:
        self._classes: dict[str, ClassInfo] = {}

    def __len__(self) -> int:
        return len(self._classes)

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    @property
    def classes(self) -> dict[str, ClassInfo]:
        """Collected classes in discovery order."""
        return dict(self._classes)

    def collect(self, type_info: TypeInfo) -> None:
        """Collect every named type reachable from ``type_info``."""
        if isinstance(type_info, ClassInfo):
            for f in type_info.fields:
                self.collect(f.type_info)
            self.add(type_info)
        elif isinstance(type_info, CollectionInfo):
            self.collect(type_info.element_type_info)
        elif isinstance(type_info, MapInfo):
            self.collect(type_info.key_type_info)
            self.collect(type_info.value_type_info)

    def collect_function(self, function: FunctionInfo) -> None:
        """Collect from a function's return type, parameters and exceptions."""
        self.collect(function.return_type_info)
        for parameter in function.parameters:
            self.collect(parameter.type_info)
        for exception in function.exceptions:
            self.collect(exception)

    def add(self, class_info: ClassInfo) -> None:
        """Insert one class; re-inserting an equal definition is a no-op.

        Raises:
            DuplicateQualifiedNameConflict: If a different definition already
                holds the same qualified name
        """
        existing = self._classes.get(class_info.name)
        if existing is None:
            self._classes[class_info.name] = class_info
        elif existing != class_info:
            raise DuplicateQualifiedNameConflict(class_info.name, existing, class_info)

    def merge(self, classes: Iterable[ClassInfo]) -> None:
        """Union another class set into this one by qualified name."""
        for class_info in classes:
            self.add(class_info)
