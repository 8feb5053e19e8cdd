"""Tests for listing the module files of distribution units."""

import os

from model.records import DistributionUnit
from scanner.discovery import find_files_to_document_in_package, iter_files


class TestIterFiles:
    """Tests for iter_files."""

    def test_lists_sorted_files(self, tmp_path, make_file):
        """Test files are listed recursively in sorted order."""
        make_file(tmp_path / "b.py")
        make_file(tmp_path / "a" / "c.py")

        files = list(iter_files(tmp_path))

        assert files == [tmp_path / "a" / "c.py", tmp_path / "b.py"]

    def test_skips_hidden(self, tmp_path, make_file):
        """Test hidden files and directories are skipped."""
        make_file(tmp_path / ".hidden.py")
        make_file(tmp_path / ".git" / "config.py")
        make_file(tmp_path / "shown.py")

        assert list(iter_files(tmp_path)) == [tmp_path / "shown.py"]

    def test_unit_root_lists_public_dir_only(self, tmp_path, make_file):
        """Test a unit root only exposes its public directory."""
        make_file(tmp_path / "package.yaml")
        make_file(tmp_path / "lib" / "a.py")
        make_file(tmp_path / "tool" / "build.py")

        assert list(iter_files(tmp_path)) == [tmp_path / "lib" / "a.py"]

    def test_symlink_loop(self, tmp_path, make_file):
        """Test a symlink back to an ancestor is not followed forever."""
        make_file(tmp_path / "a.py")
        (tmp_path / "loop").symlink_to(tmp_path, target_is_directory=True)

        files = list(iter_files(tmp_path))

        assert tmp_path / "a.py" in files
        assert len(files) == 1

    def test_missing_directory(self, tmp_path):
        """Test a missing directory yields nothing."""
        assert list(iter_files(tmp_path / "missing")) == []


class TestFindFilesToDocument:
    """Tests for find_files_to_document_in_package."""

    def test_top_level_files_only(self, tmp_path, make_file):
        """Test the private subtree and foreign suffixes are left out."""
        unit = DistributionUnit(name="app", root=tmp_path / "app")
        make_file(unit.public_root / "a.py")
        make_file(unit.public_root / "nested" / "b.py")
        make_file(unit.public_root / "notes.txt")
        make_file(unit.private_root / "internal.py")
        make_file(unit.root / "setup.py")

        files = list(find_files_to_document_in_package(unit))

        assert files == [
            os.path.abspath(unit.public_root / "a.py"),
            os.path.abspath(unit.public_root / "nested" / "b.py"),
        ]

    def test_dependencies_and_exclude(self, tmp_path, make_file):
        """Test dependencies are listed unless excluded by name."""
        unit = DistributionUnit(name="app", root=tmp_path / "app")
        kept = DistributionUnit(name="kept", root=tmp_path / "kept")
        dropped = DistributionUnit(name="dropped", root=tmp_path / "dropped")
        for current in (unit, kept, dropped):
            make_file(current.public_root / f"{current.name}.py")

        files = list(
            find_files_to_document_in_package(unit, [kept, dropped], exclude=["dropped"])
        )

        assert files == [
            os.path.abspath(unit.public_root / "app.py"),
            os.path.abspath(kept.public_root / "kept.py"),
        ]

    def test_nested_packages_skipped(self, tmp_path, make_file):
        """Test copies under a packages directory are not listed twice."""
        unit = DistributionUnit(name="app", root=tmp_path / "app")
        make_file(unit.public_root / "a.py")
        make_file(unit.public_root / "packages" / "copy.py")

        files = list(find_files_to_document_in_package(unit))

        assert files == [os.path.abspath(unit.public_root / "a.py")]

    def test_unit_inside_packages(self, tmp_path, make_file):
        """Test a unit whose root is under a packages directory is listed."""
        unit = DistributionUnit(name="app", root=tmp_path / "packages" / "app")
        make_file(unit.public_root / "a.py")

        files = list(find_files_to_document_in_package(unit))

        assert files == [os.path.abspath(unit.public_root / "a.py")]

    def test_custom_suffixes(self, tmp_path, make_file):
        """Test units can declare their own source suffixes."""
        unit = DistributionUnit(
            name="app", root=tmp_path / "app", source_suffixes=frozenset({".pyi"})
        )
        make_file(unit.public_root / "a.py")
        make_file(unit.public_root / "a.pyi")

        files = list(find_files_to_document_in_package(unit))

        assert files == [os.path.abspath(unit.public_root / "a.pyi")]
