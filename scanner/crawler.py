"""
Fixed-point crawl that discovers every module reachable from a set of files.

Each pass resolves the files not seen before, collects every file the
resolved modules reference, and widens the working set. The crawl stops
once a pass finds no file that the previous pass had not already seen.
"""

import os
from typing import Callable, Iterable, Optional, Set

from loguru import logger

from model.records import DistributionUnit, ModuleRecord
from .discovery import find_files_to_document_in_package
from .errors import MissingIncludedModulesError
from .options import DiscoveryOptions, OptionsOverlays
from .progress import LoggingProgress, ProgressReporter
from .resolver import ResolutionFailure, Resolver
from .state import DiscoveryState, files_referenced_by


ModuleCallback = Callable[[ModuleRecord], None]


class DiscoveryCrawler:
    """
    Discovers modules by repeatedly resolving a growing set of files.

    Resolution is strictly sequential: only one resolved module is alive
    at a time, since resolved modules are expensive to hold.

    Args:
        resolver: Turns files into module records.
        options: Include/exclude lists and related options.
        overlays: Per-directory option overlays consulted for
            include-external files. None disables the lookup.
        progress: Progress hooks, called in ordinary mode. Defaults to
            debug-level log lines.
        skip_unreachable_platform_files: Do not pull in the whole platform
            manifest when the platform unit is first met. Test use only.
    """

    def __init__(
        self,
        resolver: Resolver,
        options: DiscoveryOptions,
        overlays: Optional[OptionsOverlays] = None,
        progress: Optional[ProgressReporter] = None,
        skip_unreachable_platform_files: bool = False,
    ):
        self.resolver = resolver
        self.options = options
        self.overlays = overlays
        self.progress = progress or LoggingProgress()
        self.skip_unreachable_platform_files = skip_unreachable_platform_files

    def should_include(self, module: ModuleRecord) -> bool:
        """Whether ``module`` passes the include list."""
        return not self.options.include or module.name in self.options.include

    def _included_externals_from(self, files: Iterable[str]) -> Set[str]:
        if self.overlays is None:
            return set()
        return set(self.overlays.included_externals_from(files))

    def _units_for(self, files: Iterable[str]) -> Set[DistributionUnit]:
        units = set()
        for path in files:
            unit = self.resolver.distribution_for(path)
            if unit is not None:
                units.add(unit)
        return units

    def _files_for_new_unit(self, unit: DistributionUnit) -> Set[str]:
        if unit.is_platform:
            if self.skip_unreachable_platform_files:
                return set()
            return {os.path.abspath(path) for path in unit.manifest}
        return set(find_files_to_document_in_package(unit))

    async def crawl(
        self,
        files: Iterable[str],
        on_module: ModuleCallback,
        state: DiscoveryState,
        adding_specials: bool = False,
    ) -> None:
        """
        Discover modules reachable from ``files``, delivering each once.

        Args:
            files: Initial file paths.
            on_module: Called with each newly discovered module.
            state: Shared discovery state; its ``processed_modules`` decides
                what has already been delivered.
            adding_specials: Only special anchor modules are being added.
                They skip the include list, include-external lookup,
                distribution pull-in and progress reporting.
        """
        files = set(files)
        processed_files: Set[str] = set()
        known_units: Set[DistributionUnit] = set()
        state.reset_passes()

        if not adding_specials:
            self.progress.start(len(files))
        while True:
            state.begin_pass()
            new_files: Set[str] = set()
            if not adding_specials:
                self.progress.update_total(len(files))

            for path in sorted(state.module_candidates(files)):
                if path in processed_files:
                    continue
                processed_files.add(path)
                if not adding_specials:
                    self.progress.tick()

                logger.debug(f"Resolving {path}...")
                resolved = await self.resolver.resolve(path)
                if resolved is None or isinstance(resolved, ResolutionFailure):
                    if isinstance(resolved, ResolutionFailure):
                        logger.debug(f"Treating {path} as a part: {resolved.reason}")
                    state.mark_part(path)
                    continue

                files_referenced_by(resolved, new_files)
                if state.is_processed(resolved):
                    continue
                if adding_specials or self.should_include(resolved):
                    on_module(resolved)
                    state.mark_processed(resolved)

            files |= new_files
            if not adding_specials:
                files |= self._included_externals_from(new_files)

            candidates = state.module_candidates(files)
            units = self._units_for(candidates)
            state.end_pass(files)

            if not adding_specials:
                # Every public module of a newly met unit is needed to work
                # out canonical owners, even when the unit is not documented.
                for unit in sorted(units - known_units, key=lambda u: u.name):
                    files |= self._files_for_new_unit(unit)
                known_units |= units

            if state.reached_fixed_point():
                break
        if not adding_specials:
            self.progress.complete()

    def check_for_missing_included(self, found_modules: Iterable[ModuleRecord]) -> None:
        """
        Raise if an included module name was never discovered.

        Raises:
            MissingIncludedModulesError: With the unmatched and known names.
        """
        if not self.options.include:
            return
        known_names = [module.name for module in found_modules]
        not_found = self.options.include - set(known_names) - self.options.exclude
        if not_found:
            raise MissingIncludedModulesError(not_found, known_names)
