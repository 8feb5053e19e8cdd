"""File discovery utilities for listing the module files of a distribution unit."""

import os
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set

from model.records import DistributionUnit


# A directory holding this file next to a public dir is a unit root.
UNIT_MANIFEST = "package.yaml"

_PACKAGES_SEGMENT = f"{os.sep}packages{os.sep}"


def iter_files(
    directory: Path,
    public_dir: str = "lib",
    listed_directories: Optional[Set[Path]] = None,
) -> Iterator[Path]:
    """
    Iterate over files in a directory tree.

    Hidden files and directories are skipped, and symlinked directories are
    listed at most once along any path. When a directory is a unit root
    (it contains ``package.yaml`` and the public dir), only the public dir is
    descended into.

    Args:
        directory: Directory to list.
        public_dir: Name of the public module directory of a unit.
        listed_directories: Resolved directories already on the current path.

    Yields:
        Path objects for every file found, in sorted order.
    """
    try:
        resolved = directory.resolve()
    except OSError:
        return
    listed = set(listed_directories or ())
    if resolved in listed:
        return
    listed.add(resolved)

    try:
        entries = sorted(directory.iterdir())
    except (PermissionError, FileNotFoundError, NotADirectoryError):
        return

    manifest = directory / UNIT_MANIFEST
    library = directory / public_dir
    if manifest.is_file() and library.is_dir():
        entries = [library]

    for entry in entries:
        if entry.name.startswith("."):
            continue
        if entry.is_dir():
            yield from iter_files(entry, public_dir, listed)
        elif entry.is_file():
            yield entry


def _is_within(path: Path, parent: Path) -> bool:
    """Check if a path lies strictly inside ``parent``."""
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return path != parent


def find_files_to_document_in_package(
    unit: DistributionUnit,
    dependencies: Iterable[DistributionUnit] = (),
    exclude: Iterable[str] = (),
) -> Iterator[str]:
    """
    List the top-level module files of a unit and, optionally, its dependencies.

    Only files inside ``<root>/<public_dir>`` and outside the private subtree
    are yielded. Paths passing through a ``packages`` directory are skipped
    unless the unit root itself lives under one, so nested copies are not
    listed twice.

    Args:
        unit: The distribution unit to list.
        dependencies: Additional units to list alongside ``unit``.
        exclude: Names of dependency units to leave out.

    Yields:
        Absolute file paths as strings.
    """
    excluded = set(exclude)
    units = [unit]
    for dependency in dependencies:
        if dependency.name in excluded or dependency in units:
            continue
        units.append(dependency)

    for current in units:
        root = Path(os.path.abspath(current.root))
        public_root = root / current.public_dir
        private_root = public_root / current.private_dir
        root_under_packages = _PACKAGES_SEGMENT in f"{root}{os.sep}"

        for file_path in iter_files(root, current.public_dir):
            path = Path(os.path.abspath(file_path))
            if path.suffix not in current.source_suffixes:
                continue
            if not root_under_packages and _PACKAGES_SEGMENT in str(path):
                continue
            if not _is_within(path, public_root) or _is_within(path, private_root):
                continue
            yield str(path)
