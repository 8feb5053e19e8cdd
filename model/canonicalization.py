"""
Heuristic scoring that picks a canonical home module for a symbol.

A symbol reachable through several modules (re-exports, barrel modules) gets
exactly one page. Each candidate module is scored independently; the highest
score wins and a narrow margin over the runner-up is reported as an
ambiguous re-export.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .diagnostics import PackageWarning
from .records import ModuleRecord


CANONICAL_FOR_BOOST = 5.0
DEPRECATED_PENALTY = -1.0
PACKAGE_NAME_BOOST = 1.0
LONG_NAME_BOOST = 0.01
LOCATION_PART_START_BOOST = 0.001

DEFAULT_MIN_CONFIDENCE = 0.1

WarnCallback = Callable[[PackageWarning, str, Iterable[str]], None]


class Reason(Enum):
    """Why a candidate's score changed."""

    CANONICAL_FOR = "marked canonical-for"
    DEPRECATED = "is deprecated"
    PACKAGE_NAME = "embeds package name"
    LONG_NAME = "name is long"
    SHARED_NAME_PART = "element location shares parts with name"
    LOCATION_PART_START = "element location parts start with parts of name"

    def __str__(self) -> str:
        return self.value


def _precision(value: float) -> str:
    # Four significant digits, trailing zeros kept; Python exponent form
    # ("1.235e+04") for large values.
    return f"{value:#.4g}"


class ScoredCandidate:
    """The accumulated score of one module for one symbol."""

    def __init__(self, module: ModuleRecord):
        self.module = module
        self.score = 0.0
        self.reasons: List[Tuple[Reason, float]] = []

    def alter_score(self, delta: float, reason: Reason) -> None:
        self.score += delta
        if delta != 0:
            self.reasons.append((reason, delta))

    def describe(self) -> str:
        """Render the score and every contribution, in order, for debugging."""
        reason_text = ", ".join(
            f"{reason} ({'+' if delta >= 0 else ''}{_precision(delta)})"
            for reason, delta in self.reasons
        )
        return f"{self.module.name}: {_precision(self.score)} - [{reason_text}]"

    def __repr__(self) -> str:
        return f"ScoredCandidate({self.describe()})"


def score_module(
    module: ModuleRecord,
    qualified_name: str,
    location_segments: FrozenSet[str],
) -> ScoredCandidate:
    """
    Score how likely ``module`` is the intended home of a symbol.

    Args:
        module: Candidate module exposing the symbol.
        qualified_name: Fully-qualified name of the symbol.
        location_segments: Segments of the symbol's declaring-file path.

    Returns:
        The scored candidate with its list of contributions.
    """
    candidate = ScoredCandidate(module)
    name_segments = module.name_segments

    # An explicit claim overrides every other concern.
    if qualified_name in module.canonical_for:
        candidate.alter_score(CANONICAL_FOR_BOOST, Reason.CANONICAL_FOR)

    if module.is_deprecated:
        candidate.alter_score(DEPRECATED_PENALTY, Reason.DEPRECATED)

    if not (module.distribution.name_segments & name_segments):
        candidate.alter_score(PACKAGE_NAME_BOOST, Reason.PACKAGE_NAME)

    candidate.alter_score(LONG_NAME_BOOST * len(name_segments), Reason.LONG_NAME)

    # Every symbol with a declaring file has a location; without one the
    # name-only part of the score is the best guess.
    if not location_segments:
        return candidate

    candidate.alter_score(
        len(name_segments & location_segments) / len(location_segments),
        Reason.SHARED_NAME_PART,
    )

    boost = 0.0
    for segment in location_segments:
        for piece in segment.split("_"):
            for name_segment in name_segments:
                if piece.startswith(name_segment):
                    boost += LOCATION_PART_START_BOOST
    candidate.alter_score(boost, Reason.LOCATION_PART_START)
    return candidate


@dataclass(frozen=True)
class CanonicalDecision:
    """Outcome of one canonicalization: the winner and the full ranking."""

    module: ModuleRecord
    confidence: float
    low_confidence: bool
    ranked: Tuple[ScoredCandidate, ...]


class CanonicalizationScorer:
    """
    Chooses the canonical module among the modules that expose a symbol.

    Holds no state between calls apart from its configuration, so one
    instance may serve independent symbols concurrently.
    """

    def __init__(
        self,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        warn: Optional[WarnCallback] = None,
    ):
        self.min_confidence = min_confidence
        self._warn = warn

    def rank(
        self,
        qualified_name: str,
        location_segments: Iterable[str],
        candidates: Sequence[ModuleRecord],
    ) -> CanonicalDecision:
        """
        Score every candidate and pick the winner.

        Candidates are ranked ascending by score. Among candidates tied for the
        top score, the one supplied first wins.

        A low-confidence pick is reported as
        ``[low, ..., high] -> winner (confidence 0.7390)``, candidate names in
        square brackets and ascending score order, with one ``describe()``
        line per candidate as extended debug output.

        Raises:
            ValueError: If ``candidates`` is empty.
        """
        if not candidates:
            raise ValueError(f"No candidate modules for {qualified_name}")
        segments = frozenset(location_segments)
        scored = [score_module(module, qualified_name, segments) for module in candidates]
        order = sorted(range(len(scored)), key=lambda i: (scored[i].score, -i))
        ranked = tuple(scored[i] for i in order)

        winner = ranked[-1]
        if len(ranked) < 2:
            return CanonicalDecision(winner.module, math.inf, False, ranked)

        confidence = winner.score - ranked[-2].score
        low_confidence = confidence < self.min_confidence
        if low_confidence and self._warn is not None:
            names = ", ".join(c.module.name for c in ranked)
            message = (
                f"[{names}] -> {winner.module.name} "
                f"(confidence {_precision(confidence)})"
            )
            self._warn(
                PackageWarning.AMBIGUOUS_REEXPORT,
                message,
                [c.describe() for c in ranked],
            )
        return CanonicalDecision(winner.module, confidence, low_confidence, ranked)

    def canonicalize(
        self,
        qualified_name: str,
        location_segments: Iterable[str],
        candidates: Sequence[ModuleRecord],
    ) -> ModuleRecord:
        """Return the canonical module for a symbol."""
        return self.rank(qualified_name, location_segments, candidates).module
