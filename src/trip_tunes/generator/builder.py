"""Playlist generation — catalog search followed by duration fitting."""

from __future__ import annotations

import logging

from trip_tunes.catalog.duration import format_duration
from trip_tunes.catalog.youtube import CatalogProvider
from trip_tunes.db.models import Playlist, TravelTime
from trip_tunes.exceptions import (
    FitFailureReason,
    InvalidInputError,
    NoCandidatesError,
    NoFeasibleCombinationError,
)
from trip_tunes.generator.fitter import DurationFitter

logger = logging.getLogger(__name__)


class PlaylistGenerator:
    """Builds a trip-length playlist from a keyword search."""

    def __init__(
        self,
        catalog: CatalogProvider,
        fitter: DurationFitter | None = None,
    ) -> None:
        self.catalog = catalog
        self.fitter = fitter or DurationFitter()
        self.latest: Playlist | None = None
        self._in_progress = 0
        self._generation = 0

    @property
    def is_generating(self) -> bool:
        return self._in_progress > 0

    async def generate(
        self,
        keywords: str,
        travel_time: TravelTime,
        name: str | None = None,
    ) -> Playlist:
        """Search the catalog and fit the results to ``travel_time``.

        Only the most recently started call updates ``latest``; an older call
        that finishes afterwards still returns its playlist to its caller.

        Raises:
            InvalidInputError: Blank keywords or a zero-length trip.
            CatalogUnavailableError: The catalog could not be queried.
            NoCandidatesError: The search produced no usable videos.
            NoFeasibleCombinationError: No video fits under the trip length.
        """
        keywords = keywords.strip()
        target = travel_time.total_seconds
        if target <= 0:
            raise InvalidInputError("Enter a trip length of at least one minute.")
        if not keywords:
            raise InvalidInputError("Enter some music keywords.")

        self._generation += 1
        generation = self._generation
        self._in_progress += 1
        try:
            candidates = await self.catalog.search(keywords)
            candidates = [item for item in candidates if item.duration_seconds > 0]
            if not candidates:
                raise NoCandidatesError(
                    f"No music videos matched {keywords!r}. "
                    "Only the music category is searched."
                )

            result = self.fitter.fit(candidates, target)
            if not result.items:
                raise self._no_fit_error(candidates, target)

            playlist = Playlist(
                name=name or f"{keywords} ({travel_time.label})",
                items=result.items,
                total_duration_seconds=result.total_seconds,
                target_duration_seconds=target,
            )
        finally:
            self._in_progress -= 1

        logger.info(
            "Generated playlist %r: %d videos, %s of %s",
            playlist.name,
            playlist.item_count,
            format_duration(playlist.total_duration_seconds),
            format_duration(target),
        )
        if generation == self._generation:
            self.latest = playlist
        else:
            logger.debug("Discarding superseded generation %d", generation)
        return playlist

    @staticmethod
    def _no_fit_error(candidates, target: int) -> NoFeasibleCombinationError:
        if all(item.duration_seconds > target for item in candidates):
            return NoFeasibleCombinationError(
                "Every video found is individually longer than the trip. "
                "Lengthen the trip or change the keywords.",
                FitFailureReason.ALL_ITEMS_TOO_LONG,
            )
        return NoFeasibleCombinationError(
            "Could not build a playlist that fits the trip length. "
            "Try different keywords or a different trip length.",
            FitFailureReason.NO_COMBINATION,
        )
