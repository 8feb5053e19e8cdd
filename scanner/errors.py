"""Errors that abort module discovery."""

from typing import Iterable


class DiscoveryError(Exception):
    """Base class for fatal discovery errors."""


class OptionsError(DiscoveryError):
    """Options are malformed or contradict the environment."""


class MissingIncludedModulesError(DiscoveryError):
    """
    Modules named in the include list were never discovered.

    Carries both the unmatched names and every discovered name so the
    include list can be corrected.
    """

    def __init__(self, not_found: Iterable[str], known_names: Iterable[str]):
        self.not_found = sorted(not_found)
        self.known_names = sorted(known_names)
        super().__init__(
            f"Did not find: [{', '.join(self.not_found)}] in "
            f"known modules: [{', '.join(self.known_names)}]"
        )
