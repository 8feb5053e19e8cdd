"""Graph data model for storing discovered modules and their re-export relationships."""

from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from model.canonicalization import CanonicalizationScorer, CanonicalDecision
from model.diagnostics import WarningCollector
from model.records import Canonicalizable, ModuleRecord
from scanner.options import DiscoveryOptions


class ModuleGraph:
    """
    A directed graph of discovered modules.

    Nodes are modules in delivery order; edges record 'importer -> imported'
    and 'exporter -> exported' relationships. Special anchor modules are
    tracked separately but are nodes like any other.
    """

    def __init__(
        self,
        min_confidence: float = 0.1,
        warnings: Optional[WarningCollector] = None,
    ):
        self._modules: List[ModuleRecord] = []
        self._special: Set[ModuleRecord] = set()
        self._imports: Dict[ModuleRecord, Set[ModuleRecord]] = {}
        self._exports: Dict[ModuleRecord, Set[ModuleRecord]] = {}
        self.warnings = warnings if warnings is not None else WarningCollector()
        self.scorer = CanonicalizationScorer(min_confidence, self.warnings.warn)

    @classmethod
    def from_options(
        cls,
        options: DiscoveryOptions,
        warnings: Optional[WarningCollector] = None,
    ) -> "ModuleGraph":
        """Create a graph whose scorer uses the configured confidence threshold."""
        return cls(options.ambiguous_reexport_scorer_min_confidence, warnings)

    @property
    def modules(self) -> List[ModuleRecord]:
        """Return all modules in the order they were added."""
        return list(self._modules)

    @property
    def special_modules(self) -> Set[ModuleRecord]:
        return self._special.copy()

    def _add(self, module: ModuleRecord) -> None:
        if module in self._imports:
            raise ValueError(f"{module!r} was already added to the graph")
        self._modules.append(module)
        self._imports[module] = set(module.imports)
        self._exports[module] = set(module.exports)

    def add_module(self, module: ModuleRecord) -> None:
        """Add a discovered module."""
        self._add(module)

    def add_special_module(self, module: ModuleRecord) -> None:
        """Add an always-included anchor module."""
        self._add(module)
        self._special.add(module)

    def get_imports(self, module: ModuleRecord) -> Set[ModuleRecord]:
        """Get all modules that ``module`` imports directly."""
        return self._imports.get(module, set()).copy()

    def get_exports(self, module: ModuleRecord) -> Set[ModuleRecord]:
        """Get all modules that ``module`` re-exports directly."""
        return self._exports.get(module, set()).copy()

    def get_exporters(self, module: ModuleRecord) -> Set[ModuleRecord]:
        """Get all modules in the graph that re-export ``module`` directly."""
        return {source for source, targets in self._exports.items() if module in targets}

    def modules_exposing(self, module: ModuleRecord) -> List[ModuleRecord]:
        """
        Get every module in the graph through which ``module``'s symbols are visible.

        That is ``module`` itself (when in the graph) plus every module that
        re-exports it, directly or through a chain of re-exports. The result
        follows graph order, so repeated runs agree.
        """
        reachable: Set[ModuleRecord] = set()
        worklist = [module]
        while worklist:
            current = worklist.pop()
            if current in reachable:
                continue
            reachable.add(current)
            worklist.extend(self.get_exporters(current))
        return [m for m in self._modules if m in reachable]

    def canonical_decision(
        self,
        symbol: Canonicalizable,
        candidates: Sequence[ModuleRecord],
    ) -> CanonicalDecision:
        """Rank ``candidates`` as homes for ``symbol``."""
        return self.scorer.rank(symbol.qualified_name, symbol.location_segments, candidates)

    def canonical_module_for(
        self,
        symbol: Canonicalizable,
        declaring_module: ModuleRecord,
    ) -> Optional[ModuleRecord]:
        """
        Choose the module whose page hosts ``symbol``.

        Returns None when no module in the graph exposes the declaring module.
        """
        if symbol.is_canonical:
            return declaring_module
        candidates = self.modules_exposing(declaring_module)
        if not candidates:
            return None
        return self.canonical_decision(symbol, candidates).module

    def iter_edges(self) -> Iterator[Tuple[ModuleRecord, ModuleRecord]]:
        """Iterate over all import and export edges as (source, target) tuples."""
        for source in self._modules:
            targets = self._imports[source] | self._exports[source]
            for target in sorted(targets, key=lambda m: m.path):
                yield source, target

    def __len__(self) -> int:
        """Return the number of modules in the graph."""
        return len(self._modules)

    def __contains__(self, module: ModuleRecord) -> bool:
        return module in self._imports

    def __repr__(self) -> str:
        edge_count = sum(1 for _ in self.iter_edges())
        return (
            f"ModuleGraph(modules={len(self._modules)}, special={len(self._special)}, "
            f"edges={edge_count}, warnings={len(self.warnings)})"
        )
