"""Tests for discovery bookkeeping."""

from pathlib import Path

from model.records import DistributionUnit, ModuleRecord
from scanner.state import DiscoveryState, files_referenced_by


UNIT = DistributionUnit(name="app", root=Path("/app"))


def module(name, **kwargs):
    return ModuleRecord(identity=name, name=name, path=f"/app/lib/{name}.py", distribution=UNIT, **kwargs)


class TestFilesReferencedBy:
    """Tests for the transitive file walk."""

    def test_imports_exports_and_parts(self):
        """Test own path, linked modules and part files are collected."""
        leaf = module("leaf", parts=["/app/lib/leaf_part.py"])
        exported = module("exported", imports=[leaf])
        root = module("root", imports=[module("imported")], exports=[exported])

        files = set()
        added = files_referenced_by(root, files)

        assert files == {
            "/app/lib/root.py",
            "/app/lib/imported.py",
            "/app/lib/exported.py",
            "/app/lib/leaf.py",
            "/app/lib/leaf_part.py",
        }
        assert added == files

    def test_cycles_terminate(self):
        """Test mutually importing modules are each visited once."""
        a = module("a")
        b = module("b", imports=[a])
        a.imports.append(b)

        files = set()
        files_referenced_by(a, files)

        assert files == {"/app/lib/a.py", "/app/lib/b.py"}

    def test_known_path_not_expanded(self):
        """Test a module already in the set is not walked again."""
        hidden = module("hidden")
        seen = module("seen", imports=[hidden])
        root = module("root", imports=[seen])

        files = {"/app/lib/seen.py"}
        added = files_referenced_by(root, files)

        assert added == {"/app/lib/root.py"}
        assert "/app/lib/hidden.py" not in files

    def test_deep_chain(self):
        """Test long re-export chains do not exhaust the stack."""
        current = module("m0")
        for i in range(1, 5000):
            current = module(f"m{i}", exports=[current])

        files = set()
        files_referenced_by(current, files)

        assert len(files) == 5000


class TestDiscoveryState:
    """Tests for DiscoveryState."""

    def test_parts_and_processed(self):
        """Test classification bookkeeping."""
        state = DiscoveryState()
        a = module("a")

        state.mark_part("/app/lib/part.py")
        state.mark_processed(a)

        assert state.is_part("/app/lib/part.py")
        assert state.is_processed(a)
        assert state.module_candidates(["/app/lib/part.py", "/app/lib/a.py"]) == {"/app/lib/a.py"}

    def test_fixed_point(self):
        """Test the fixed point is reached once a pass adds nothing new."""
        state = DiscoveryState()

        state.begin_pass()
        state.end_pass({"a", "b"})
        assert not state.reached_fixed_point()

        state.begin_pass()
        state.end_pass({"a", "b", "c"})
        assert not state.reached_fixed_point()

        state.begin_pass()
        state.end_pass({"a", "b", "c"})
        assert state.reached_fixed_point()

    def test_parts_shrink_pass(self):
        """Test files reclassified as parts do not keep the crawl going."""
        state = DiscoveryState()
        state.begin_pass()
        state.end_pass({"a", "p"})

        state.mark_part("p")
        state.begin_pass()
        state.end_pass({"a", "p"})

        assert state.files_in_current_pass == {"a"}
        assert state.reached_fixed_point()

    def test_reset_passes(self):
        """Test pass sets reset while classification survives."""
        state = DiscoveryState()
        state.mark_part("p")
        state.begin_pass()
        state.end_pass({"a"})

        state.reset_passes()

        assert state.files_in_current_pass == set()
        assert state.files_in_last_pass == set()
        assert state.is_part("p")
