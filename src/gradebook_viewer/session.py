"""One-shot gradebook load: idle -> loading -> loaded | error.

Every failure ends in the error state. There is no retry; a fresh loader is
needed for another attempt. ``cancel`` lets a consumer that went away discard
whatever the in-flight load produces.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .errors import GradebookError
from .io import Source, fetch_text, read_table
from .roster import Roster, build_roster

LOGGER = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True)
class LoadState:
    status: LoadStatus
    roster: Optional[Roster] = None
    message: Optional[str] = None


class GradebookLoader:
    def __init__(self, source: Source, fetch: Callable[[Source], str] = fetch_text) -> None:
        self.source = source
        self._fetch = fetch
        self._cancelled = False
        self.state = LoadState(LoadStatus.IDLE)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def _begin(self) -> None:
        if self.state.status is not LoadStatus.IDLE:
            raise RuntimeError(f"Loader already ran (status: {self.state.status.value})")
        self.state = LoadState(LoadStatus.LOADING)

    def _finish(self, state: LoadState) -> LoadState:
        if self._cancelled:
            LOGGER.debug("Discarding %s result of cancelled load", state.status.value)
            return self.state
        self.state = state
        return state

    def _failed(self, exc: Exception) -> LoadState:
        if not isinstance(exc, GradebookError):
            LOGGER.exception("Unexpected failure loading gradebook from %s", self.source)
        return LoadState(LoadStatus.ERROR, message=str(exc) or "Unknown error")

    def _parse(self, text: str) -> LoadState:
        try:
            return LoadState(LoadStatus.LOADED, roster=build_roster(read_table(text)))
        except Exception as exc:
            return self._failed(exc)

    def run(self) -> LoadState:
        self._begin()
        try:
            text = self._fetch(self.source)
        except Exception as exc:
            return self._finish(self._failed(exc))
        return self._finish(self._parse(text))

    async def run_async(self) -> LoadState:
        """Same as ``run``; the fetch is the only point where this task yields."""
        self._begin()
        try:
            text = await asyncio.to_thread(self._fetch, self.source)
        except Exception as exc:
            return self._finish(self._failed(exc))
        if self._cancelled:
            return self.state
        return self._finish(self._parse(text))
