"""Interface to the resolver that turns source files into module records."""

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Union

from model.records import DistributionUnit, ModuleRecord


@dataclass(frozen=True)
class ResolutionFailure:
    """A file the resolver could not turn into a module."""

    path: str
    reason: str = ""


ResolveResult = Union[ModuleRecord, ResolutionFailure, None]


class Resolver(Protocol):
    """
    Resolves source files into linked module records.

    ``resolve`` returns None for a part file (a fragment owned by some other
    module) and a ``ResolutionFailure`` when the file cannot be resolved.
    Exceptions raised by ``resolve`` are treated as fatal by the crawler.
    """

    async def resolve(self, path: str) -> ResolveResult: ...

    def distribution_for(self, path: str) -> Optional[DistributionUnit]: ...

    def dependencies_of(self, unit: DistributionUnit) -> Iterable[DistributionUnit]: ...
