"""Data records describing resolved modules and the units that ship them."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Hashable, List, Optional, Protocol, Tuple


# Separators used when breaking a declared name into segments.
_NAME_SPLITTER = re.compile(r"package:|[\\/;._\-]")

# Separators used when breaking a declaring-file path into segments.
# Underscores are kept; the scorer splits them itself.
_LOCATION_SPLITTER = re.compile(r"package:|[\\/;.]")

DEFAULT_SOURCE_SUFFIXES = frozenset({".py"})


def split_name_segments(name: str) -> FrozenSet[str]:
    """
    Split a declared name into its non-empty segments.

    Args:
        name: A module or distribution name, e.g. "http_client.retry".

    Returns:
        Set of segments, e.g. {"http", "client", "retry"}.
    """
    return frozenset(piece for piece in _NAME_SPLITTER.split(name) if piece)


def split_location_segments(location: str) -> FrozenSet[str]:
    """
    Split a declaring-file location into its non-empty segments.

    The "package:" scheme and path separators are stripped.
    """
    return frozenset(piece for piece in _LOCATION_SPLITTER.split(location) if piece)


@dataclass(frozen=True)
class DistributionUnit:
    """
    A named collection of modules shipped and versioned together.

    The public module files of a unit live under ``root/public_dir``; anything
    under ``root/public_dir/private_dir`` is internal to the unit.
    A platform unit lists its module files in ``manifest`` instead.
    Units compare and hash by ``(name, root)`` only.
    """

    name: str
    root: Path
    is_platform: bool = field(default=False, compare=False)
    manifest: Tuple[str, ...] = field(default=(), compare=False)
    requires_platform_extension: bool = field(default=False, compare=False)
    public_dir: str = field(default="lib", compare=False)
    private_dir: str = field(default="src", compare=False)
    source_suffixes: FrozenSet[str] = field(default=DEFAULT_SOURCE_SUFFIXES, compare=False)

    @property
    def name_segments(self) -> FrozenSet[str]:
        return split_name_segments(self.name)

    @property
    def public_root(self) -> Path:
        return self.root / self.public_dir

    @property
    def private_root(self) -> Path:
        return self.root / self.public_dir / self.private_dir


@dataclass(eq=False)
class ModuleRecord:
    """
    A resolved module as reported by the resolver.

    Equality and hashing go through ``identity`` only. The import/export
    lists hold the linked records of directly imported and exported modules,
    so the module graph may contain cycles.
    """

    identity: Hashable
    name: str
    path: str
    distribution: DistributionUnit
    is_deprecated: bool = False
    canonical_for: FrozenSet[str] = frozenset()
    imports: List["ModuleRecord"] = field(default_factory=list)
    exports: List["ModuleRecord"] = field(default_factory=list)
    parts: List[str] = field(default_factory=list)

    @property
    def name_segments(self) -> FrozenSet[str]:
        return split_name_segments(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleRecord):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def __repr__(self) -> str:
        return f"ModuleRecord(name={self.name!r}, path={self.path!r})"


class Canonicalizable(Protocol):
    """Anything that can be assigned a canonical home module."""

    @property
    def qualified_name(self) -> str: ...

    @property
    def location_segments(self) -> FrozenSet[str]: ...

    @property
    def is_canonical(self) -> bool: ...


@dataclass(frozen=True)
class SymbolLocation:
    """A documentable symbol and the file that declares it."""

    qualified_name: str
    declaring_path: Optional[str] = None
    is_canonical: bool = False

    @property
    def location_segments(self) -> FrozenSet[str]:
        if not self.declaring_path:
            return frozenset()
        return split_location_segments(self.declaring_path)
