"""
Source attribute data model.

Immutable records describing the attributes parsed from one native
source file: the annotated functions, their arguments and parameters,
and any documentation lines attached to each attribute.
"""

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterator, Optional, Tuple

# Attribute names
EXPORT_ATTRIBUTE = "export"
DEPENDS_ATTRIBUTE = "depends"
INTERFACES_ATTRIBUTE = "interfaces"

# Interface names
INTERFACE_R = "r"
INTERFACE_CPP = "cpp"

# Exported names starting with this prefix are host-only
HIDDEN_PREFIX = "."


@dataclass(frozen=True)
class Argument:
    """A single function argument."""

    name: str
    type: str
    default_value: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.type} {self.name}"


@dataclass(frozen=True)
class Function:
    """
    A native function signature.

    The empty function (``Function.empty()``) stands for "no function
    attached" and is never exported.
    """

    name: str = ""
    type: str = ""
    arguments: Tuple[Argument, ...] = ()

    @classmethod
    def empty(cls) -> 'Function':
        return cls()

    def is_empty(self) -> bool:
        return not self.name

    def renamed_to(self, name: str) -> 'Function':
        """Return a copy of this function under a different name."""
        return replace(self, name=name)

    def signature(self) -> str:
        """Canonical ``type name(type arg, ...)`` form."""
        args = ", ".join(str(arg) for arg in self.arguments)
        return f"{self.type} {self.name}({args})"

    def __str__(self) -> str:
        return self.signature()


@dataclass(frozen=True)
class Param:
    """An attribute parameter, e.g. ``name`` or ``name = value``."""

    name: str
    value: str = ""


@dataclass(frozen=True)
class Attribute:
    """One annotation occurrence bound to the declaration that follows it."""

    name: str
    params: Tuple[Param, ...] = ()
    function: Function = field(default_factory=Function.empty)
    roxygen: Tuple[str, ...] = ()

    def param_names(self) -> Tuple[str, ...]:
        return tuple(param.name for param in self.params)

    def is_exported_function(self) -> bool:
        """True for an export attribute with a function attached."""
        return self.name == EXPORT_ATTRIBUTE and not self.function.is_empty()

    def exported_name(self) -> str:
        """
        Public name of the exported function.

        The first parameter, when present, renames the export; otherwise
        the function's own name is used.
        """
        if self.params:
            return self.params[0].name
        return self.function.name


@dataclass(frozen=True)
class SourceFileAttributes:
    """
    All attributes parsed from a single source file.

    Iteration yields attributes in declaration order.
    """

    source_file: str
    attributes: Tuple[Attribute, ...] = ()
    interfaces: FrozenSet[str] = frozenset({INTERFACE_R})
    prototypes: Tuple[str, ...] = ()

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)

    def empty(self) -> bool:
        return not self.attributes

    def has_interface(self, name: str) -> bool:
        return name in self.interfaces

    def exported_functions(self) -> Tuple[Attribute, ...]:
        return tuple(attr for attr in self.attributes if attr.is_exported_function())

    def exported_names(self) -> Tuple[str, ...]:
        return tuple(attr.exported_name() for attr in self.exported_functions())

    def depends(self) -> Tuple[str, ...]:
        """Names listed by every depends attribute, in order."""
        names = []
        for attr in self.attributes:
            if attr.name == DEPENDS_ATTRIBUTE:
                names.extend(attr.param_names())
        return tuple(names)
