"""Hardware discovery sequencing.

Discovery issues one GetHardwareDefinition query per object category, one
at a time, and folds each answer into an accumulator with merge_response().
Once the last category has answered, the accumulated tree is handed out
exactly once.

Every discovery run is tagged with the connection generation it was started
for, so an answer arriving from a connection that has since been replaced
cannot leak into the run of the new connection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .attributes import DISCOVER_CATEGORIES
from .codec import hardware_definition_request
from .merge import merge_response

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .codec import ICRequest

_LOGGER = logging.getLogger(__name__)


class HardwareDiscovery:
    """Tracks the progress of one discovery run."""

    def __init__(self, categories: Sequence[str] = DISCOVER_CATEGORIES) -> None:
        self._categories = tuple(categories)
        self._generation: int | None = None
        self._sent: list[str] = []
        self._buffer: list[Any] | None = None
        self._complete = False

    def __repr__(self) -> str:
        return (
            f"HardwareDiscovery(generation={self._generation}, "
            f"sent={len(self._sent)}/{len(self._categories)}, complete={self._complete})"
        )

    @property
    def generation(self) -> int | None:
        """Return the generation of the current run, None when idle."""
        return self._generation

    @property
    def in_progress(self) -> bool:
        """Return True while answers are still expected."""
        return self._generation is not None and not self._complete

    @property
    def complete(self) -> bool:
        """Return True once every category has answered."""
        return self._complete

    @property
    def categories_sent(self) -> list[str]:
        """Return the categories queried so far in this run."""
        return list(self._sent)

    def start(self, generation: int) -> ICRequest:
        """Begin a new run, discarding any previous one.

        Returns:
            The query for the first category.
        """
        if self.in_progress:
            _LOGGER.debug(
                "Discarding discovery of generation %s for generation %s",
                self._generation,
                generation,
            )
        self._generation = generation
        self._sent = []
        self._buffer = None
        self._complete = False
        return self._next_request()

    def cancel(self) -> None:
        """Stop the current run and drop what was merged so far."""
        self._generation = None
        self._sent = []
        self._buffer = None
        self._complete = False

    def _next_request(self) -> ICRequest:
        category = self._categories[len(self._sent)]
        self._sent.append(category)
        return hardware_definition_request(category)

    def handle_answer(self, generation: int, answer: Any) -> ICRequest | None:
        """Merge the answer of the last query sent.

        Returns:
            The query for the next category, or None if there is none (either
            the run is now complete or the answer was ignored).
        """
        if not self.in_progress:
            _LOGGER.debug("Ignoring hardware definition answer, no discovery in progress")
            return None
        if generation != self._generation:
            _LOGGER.debug(
                "Ignoring hardware definition answer of stale generation %s (current %s)",
                generation,
                self._generation,
            )
            return None

        if not isinstance(answer, list):
            _LOGGER.warning(
                "Unexpected hardware definition answer for %s: %r", self._sent[-1], answer
            )
            answer = []

        if self._buffer is None:
            self._buffer = answer
        else:
            merge_response(self._buffer, answer)

        if len(self._sent) < len(self._categories):
            _LOGGER.debug(
                "Merged %d of %d discovery answers", len(self._sent), len(self._categories)
            )
            return self._next_request()

        _LOGGER.debug("Discovery queries completed")
        self._complete = True
        return None

    def take_result(self) -> list[Any]:
        """Return the merged hardware definition and go idle.

        Raises:
            RuntimeError: If the run has not completed.
        """
        if not self._complete or self._buffer is None:
            raise RuntimeError("discovery has not completed")
        result = self._buffer
        self.cancel()
        return result
