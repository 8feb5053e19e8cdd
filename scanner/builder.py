"""Graph builder that orchestrates module discovery for a program and its dependencies."""

import os
from typing import Iterable, List, Optional, Protocol, Set

from loguru import logger

from model.records import DistributionUnit, ModuleRecord
from .crawler import DiscoveryCrawler
from .discovery import find_files_to_document_in_package
from .errors import OptionsError
from .options import DiscoveryOptions, OptionsOverlays
from .progress import ProgressReporter
from .resolver import Resolver
from .state import DiscoveryState


class ModuleSink(Protocol):
    """Receives discovered modules; implemented by ``graph.model.ModuleGraph``."""

    def add_module(self, module: ModuleRecord) -> None: ...

    def add_special_module(self, module: ModuleRecord) -> None: ...


class ModuleGraphBuilder:
    """
    Gathers every module to document and hands it to a module sink.

    The ordinary crawl runs to completion first; the special crawl then adds
    the anchor modules not already covered, sharing the set of processed
    modules so nothing is delivered twice.
    """

    def __init__(
        self,
        options: DiscoveryOptions,
        resolver: Resolver,
        overlays: Optional[OptionsOverlays] = None,
        progress: Optional[ProgressReporter] = None,
        skip_unreachable_platform_files: bool = False,
    ):
        self.options = options
        self.resolver = resolver
        self.overlays = overlays
        self.crawler = DiscoveryCrawler(
            resolver,
            options,
            overlays=overlays,
            progress=progress,
            skip_unreachable_platform_files=skip_unreachable_platform_files,
        )
        self.state = DiscoveryState()

    def input_unit(self) -> DistributionUnit:
        """
        Return the distribution unit being documented.

        Raises:
            OptionsError: If the resolver knows no unit for the input directory.
        """
        unit = self.resolver.distribution_for(self.options.input_dir)
        if unit is None:
            raise OptionsError(f"No distribution unit found for {self.options.input_dir}")
        return unit

    def check_environment(self) -> None:
        """
        Fail before any discovery when options contradict the environment.

        Raises:
            OptionsError: If the unit needs a platform extension whose root
                is not configured.
        """
        if self.options.platform_docs:
            return
        unit = self.input_unit()
        if unit.requires_platform_extension and not self.options.platform_extension_root:
            raise OptionsError(
                f"Distribution unit '{unit.name}' requires a platform extension "
                "but 'platform-extension-root' is not set"
            )

    def _included_externals_from(self, files: Iterable[str]) -> List[str]:
        externals = list(self.options.include_external)
        if self.overlays is not None:
            externals.extend(self.overlays.included_externals_from(files))
        return externals

    def files_to_document(self) -> Set[str]:
        """
        Return the initial set of files that may hold documented modules.

        Honours auto-include-dependencies, exclude and include-external.
        """
        unit = self.input_unit()
        if self.options.platform_docs or unit.is_platform:
            files = list(unit.manifest)
        else:
            dependencies: Iterable[DistributionUnit] = ()
            if self.options.auto_include_dependencies:
                dependencies = self.resolver.dependencies_of(unit)
            files = list(
                find_files_to_document_in_package(
                    unit, dependencies, exclude=self.options.exclude
                )
            )
        files.extend(self._included_externals_from(files))
        return {os.path.abspath(path) for path in files}

    async def build(self, graph: ModuleSink, special_files: Iterable[str] = ()) -> Set[ModuleRecord]:
        """
        Discover all modules and add them to ``graph``.

        Args:
            graph: Receives ordinary and special modules.
            special_files: Files declaring the always-included anchor modules.

        Returns:
            Every module delivered to ``graph``.

        Raises:
            OptionsError: On contradictory options, before discovery starts.
            MissingIncludedModulesError: If an included module was not found.
        """
        self.check_environment()
        files = self.files_to_document()
        specials = {os.path.abspath(path) for path in special_files}

        logger.info("Discovering modules...")
        await self.crawler.crawl(files, graph.add_module, self.state)
        self.crawler.check_for_missing_included(self.state.processed_modules)
        logger.info(f"Discovered {len(self.state.processed_modules)} modules")

        await self.crawler.crawl(
            specials - files,
            graph.add_special_module,
            self.state,
            adding_specials=True,
        )
        return set(self.state.processed_modules)
