"""Scanner package: discovers the modules of a program and its dependencies."""

from .builder import ModuleGraphBuilder
from .crawler import DiscoveryCrawler
from .discovery import find_files_to_document_in_package, iter_files
from .errors import DiscoveryError, MissingIncludedModulesError, OptionsError
from .options import DiscoveryOptions, OptionsOverlays, load_options
from .resolver import ResolutionFailure, Resolver
from .state import DiscoveryState, files_referenced_by

__all__ = [
    "ModuleGraphBuilder",
    "DiscoveryCrawler",
    "find_files_to_document_in_package",
    "iter_files",
    "DiscoveryError",
    "MissingIncludedModulesError",
    "OptionsError",
    "DiscoveryOptions",
    "OptionsOverlays",
    "load_options",
    "ResolutionFailure",
    "Resolver",
    "DiscoveryState",
    "files_referenced_by",
]
