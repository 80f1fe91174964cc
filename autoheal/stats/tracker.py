"""HealingStatsTracker — per-session counters, heal map and learnings export."""

from __future__ import annotations

import datetime
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable

import structlog

from autoheal.core.types import FailedSelector, HealingStats, LearningSnapshot
from autoheal.stats.events import EventKind, EventStream, HealingEvent, Subscriber

logger = structlog.get_logger(__name__)


class HealingStatsTracker:
    """
    Accumulates what happened during one session.

    Counters only grow; start a new session with a new tracker. Every
    ``record_*`` call is also published as a :class:`HealingEvent`.
    """

    def __init__(self) -> None:
        self._stats = HealingStats()
        self._working_fallbacks: dict[str, str] = {}
        self._events = EventStream()

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_attempt(self, candidates: list[str] | None = None) -> None:
        self._stats.total_attempts += 1
        self.emit(EventKind.ATTEMPT, candidates=list(candidates or []))

    def record_heal(self, primary: str, matched: str) -> None:
        self._stats.successful_heals += 1
        self._working_fallbacks[primary] = matched
        self.emit(EventKind.HEAL, primary=primary, matched=matched)

    def record_failure(self, failure: FailedSelector) -> None:
        self._stats.failed_selectors.append(failure)
        self.emit(EventKind.FAILURE, **failure.to_dict())

    def emit(self, kind: EventKind, **data: Any) -> None:
        self._events.publish(HealingEvent(kind=kind, data=data))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self._events.subscribe(callback)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def stats(self) -> HealingStats:
        return HealingStats(
            total_attempts=self._stats.total_attempts,
            successful_heals=self._stats.successful_heals,
            failed_selectors=list(self._stats.failed_selectors),
        )

    @property
    def working_fallbacks(self) -> dict[str, str]:
        return dict(self._working_fallbacks)

    def snapshot(self) -> LearningSnapshot:
        stats = self.stats
        return LearningSnapshot(
            working_fallbacks=self.working_fallbacks,
            failed_selectors=list(stats.failed_selectors),
            stats=stats,
            exported_at=datetime.datetime.now(datetime.timezone.utc).isoformat(),
        )

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_to(self, path: str | os.PathLike) -> LearningSnapshot:
        """
        Write the current snapshot as JSON to ``path``.

        Parent directories are created. The file is written next to the
        target and renamed into place, so readers never see a partial file.
        Concurrent exports to the same path: last writer wins.
        """
        dest = Path(path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        snapshot = self.snapshot()
        payload = json.dumps(snapshot.to_dict(), indent=2)

        fd, tmp_path = tempfile.mkstemp(
            dir=dest.parent, prefix=f".{dest.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, dest)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise

        logger.info(
            "learnings_exported",
            path=str(dest),
            total_attempts=snapshot.stats.total_attempts,
            successful_heals=snapshot.stats.successful_heals,
        )
        return snapshot
