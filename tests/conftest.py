"""Shared fixtures: an in-memory resolver and helpers to lay out units on disk."""

import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import pytest

from model.records import DistributionUnit, ModuleRecord
from scanner.resolver import ResolutionFailure


class FakeResolver:
    """
    Resolver backed by dictionaries.

    Registered modules resolve to their record, registered failures to a
    ``ResolutionFailure``, and everything else to None (a part file).
    Every call to ``resolve`` is recorded in ``calls``.
    """

    def __init__(self):
        self.modules: Dict[str, ModuleRecord] = {}
        self.failures: Set[str] = set()
        self.errors: Set[str] = set()
        self.units: List[DistributionUnit] = []
        self.dependencies: Dict[str, List[DistributionUnit]] = {}
        self.calls: List[str] = []

    def unit(self, name: str, root: Path, **kwargs) -> DistributionUnit:
        unit = DistributionUnit(name=name, root=Path(os.path.abspath(root)), **kwargs)
        self.units.append(unit)
        return unit

    def module(
        self,
        name: str,
        unit: DistributionUnit,
        path: Optional[str] = None,
        imports: Iterable[ModuleRecord] = (),
        exports: Iterable[ModuleRecord] = (),
        parts: Iterable[str] = (),
        **kwargs,
    ) -> ModuleRecord:
        if path is None:
            path = str(unit.public_root / f"{name}.py")
        path = os.path.abspath(path)
        record = ModuleRecord(
            identity=("module", path),
            name=name,
            path=path,
            distribution=unit,
            imports=list(imports),
            exports=list(exports),
            parts=[os.path.abspath(p) for p in parts],
            **kwargs,
        )
        self.modules[path] = record
        return record

    async def resolve(self, path: str):
        self.calls.append(path)
        if path in self.errors:
            raise RuntimeError(f"cannot analyze {path}")
        if path in self.failures:
            return ResolutionFailure(path, "unreadable")
        return self.modules.get(path)

    def distribution_for(self, path: str) -> Optional[DistributionUnit]:
        best = None
        for unit in self.units:
            root = str(unit.root)
            if path == root or path.startswith(root + os.sep):
                if best is None or len(root) > len(str(best.root)):
                    best = unit
        return best

    def dependencies_of(self, unit: DistributionUnit) -> List[DistributionUnit]:
        return self.dependencies.get(unit.name, [])


class RecordingProgress:
    def __init__(self):
        self.events: List[str] = []

    def start(self, total: int) -> None:
        self.events.append("start")

    def update_total(self, total: int) -> None:
        self.events.append("update")

    def tick(self) -> None:
        self.events.append("tick")

    def complete(self) -> None:
        self.events.append("complete")


def touch(path: Path, content: str = "") -> Path:
    """Create ``path`` and its parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def progress():
    return RecordingProgress()


@pytest.fixture
def make_file():
    return touch
