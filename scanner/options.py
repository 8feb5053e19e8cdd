"""Discovery options and per-directory option overlays."""

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

import yaml

from .errors import OptionsError


OVERLAY_FILENAME = "docmap_options.yaml"

DEFAULT_OPTIONS: Dict[str, Any] = {
    "include": [],
    "exclude": [],
    "auto-include-dependencies": False,
    "ambiguous-reexport-scorer-min-confidence": 0.1,
    "include-external": [],
    "platform-docs": False,
    "platform-extension-root": None,
}


def parse_file(file_path: Path) -> Optional[Any]:
    """
    Parse an options file and return its contents.

    The format follows the suffix: YAML for .yaml/.yml, JSON for .json and
    TOML for .toml. Anything else is tried as JSON, then YAML.

    Raises:
        OptionsError: If the file exists but cannot be read or parsed.
    """
    suffix = file_path.suffix.lower()
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise OptionsError(f"Cannot read options file {file_path}: {e}") from e

    try:
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(content)
        elif suffix == ".json":
            return json.loads(content)
        elif suffix == ".toml":
            return tomllib.loads(content)
        else:
            try:
                return json.loads(content)
            except json.JSONDecodeError:
                return yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise OptionsError(f"Cannot parse options file {file_path}: {e}") from e


def _string_list(key: str, value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise OptionsError(f"Option '{key}' must be a string or a list of strings")


@dataclass(frozen=True)
class DiscoveryOptions:
    """Already-parsed options consumed by the discovery crawl."""

    input_dir: str = "."
    include: FrozenSet[str] = frozenset()
    exclude: FrozenSet[str] = frozenset()
    auto_include_dependencies: bool = False
    ambiguous_reexport_scorer_min_confidence: float = 0.1
    include_external: Tuple[str, ...] = ()
    platform_docs: bool = False
    platform_extension_root: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Dict[str, Any], input_dir: str = ".") -> "DiscoveryOptions":
        """
        Build options from a kebab-case mapping merged over the defaults.

        Unknown keys are ignored.
        """
        merged = dict(DEFAULT_OPTIONS)
        merged.update(data or {})

        confidence = merged["ambiguous-reexport-scorer-min-confidence"]
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            raise OptionsError(
                "Option 'ambiguous-reexport-scorer-min-confidence' must be a number"
            )
        for key in ("auto-include-dependencies", "platform-docs"):
            if not isinstance(merged[key], bool):
                raise OptionsError(f"Option '{key}' must be true or false")

        base = Path(input_dir)
        externals = tuple(
            os.path.abspath(base / entry)
            for entry in _string_list("include-external", merged["include-external"])
        )
        extension_root = merged["platform-extension-root"]
        return cls(
            input_dir=os.path.abspath(input_dir),
            include=frozenset(_string_list("include", merged["include"])),
            exclude=frozenset(_string_list("exclude", merged["exclude"])),
            auto_include_dependencies=merged["auto-include-dependencies"],
            ambiguous_reexport_scorer_min_confidence=float(confidence),
            include_external=externals,
            platform_docs=merged["platform-docs"],
            platform_extension_root=str(extension_root) if extension_root else None,
        )


def load_options(path: Optional[str] = None, input_dir: str = ".") -> DiscoveryOptions:
    """
    Load options from a YAML, JSON or TOML file and merge them with defaults.

    A missing ``path`` yields the defaults.
    """
    data: Dict[str, Any] = {}
    if path:
        p = Path(path)
        if p.exists():
            parsed = parse_file(p) or {}
            if not isinstance(parsed, dict):
                raise OptionsError(f"Options file {p} must contain a mapping")
            data = parsed
    return DiscoveryOptions.from_mapping(data, input_dir)


@dataclass
class OptionsOverlays:
    """
    Looks up the per-directory option overlay that applies to a file.

    The nearest ``docmap_options.yaml`` in the file's directory or any
    ancestor applies. Each overlay file is parsed at most once.
    """

    filename: str = OVERLAY_FILENAME
    _by_directory: Dict[Path, Tuple[str, ...]] = field(default_factory=dict)

    def _overlay_for_directory(self, directory: Path) -> Tuple[str, ...]:
        if directory in self._by_directory:
            return self._by_directory[directory]

        candidate = directory / self.filename
        if candidate.is_file():
            data = parse_file(candidate) or {}
            if not isinstance(data, dict):
                raise OptionsError(f"Options file {candidate} must contain a mapping")
            entries = _string_list("include-external", data.get("include-external"))
            result = tuple(os.path.abspath(directory / entry) for entry in entries)
        elif directory.parent == directory:
            result = ()
        else:
            result = self._overlay_for_directory(directory.parent)

        self._by_directory[directory] = result
        return result

    def include_external(self, file_path: str) -> Tuple[str, ...]:
        """Return the absolute include-external paths that apply to ``file_path``."""
        return self._overlay_for_directory(Path(os.path.abspath(file_path)).parent)

    def included_externals_from(self, files: Iterable[str]) -> List[str]:
        """Collect include-external paths for every file in ``files``."""
        found: List[str] = []
        for file_path in files:
            found.extend(self.include_external(file_path))
        return found
