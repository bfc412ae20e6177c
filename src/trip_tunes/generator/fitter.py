"""Duration fitter — packs videos under a trip length.

Randomized greedy with restarts: each attempt shuffles the pool and accepts
every video that still fits, keeping the best total seen. The chosen subset
is shuffled once more so playback order does not follow packing order.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from trip_tunes.db.models import FitConfig, FitResult, VideoItem
from trip_tunes.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


def pack_greedy(
    ordered: Sequence[VideoItem], target_seconds: int
) -> tuple[list[VideoItem], int]:
    """Walk ``ordered`` once, keeping each video that still fits.

    Videos that would overshoot are skipped, not treated as a stop signal,
    so shorter videos later in the order can still be taken.
    """
    selected: list[VideoItem] = []
    total = 0
    for item in ordered:
        if total + item.duration_seconds <= target_seconds:
            selected.append(item)
            total += item.duration_seconds
    return selected, total


class DurationFitter:
    """Selects a near-maximal subset of videos not exceeding a target length."""

    def __init__(
        self,
        config: FitConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or FitConfig()
        self._rng = rng or random.Random()

    def fit(self, items: Sequence[VideoItem], target_seconds: int) -> FitResult:
        """Return the best subset found and its total duration.

        Args:
            items: Candidate videos, all with a positive duration.
            target_seconds: Upper bound for the summed duration.

        Returns:
            FitResult whose items are in (shuffled) playback order.
        """
        if target_seconds <= 0:
            raise InvalidInputError("Trip length must be at least one minute.")
        if not items:
            return FitResult()

        best: list[VideoItem] = []
        best_total = 0
        attempts = 0

        for attempts in range(1, self.config.max_attempts + 1):
            order = list(items)
            self._rng.shuffle(order)
            selected, total = pack_greedy(order, target_seconds)

            if total > best_total:
                best, best_total = selected, total

            if best and target_seconds - best_total <= self.config.tolerance_seconds:
                break

        logger.debug(
            "Fitted %d/%d videos: %ds of %ds after %d attempts",
            len(best), len(items), best_total, target_seconds, attempts,
        )

        playback_order = list(best)
        self._rng.shuffle(playback_order)
        return FitResult(items=playback_order, total_seconds=best_total)
