"""Append-only audit journal with unit-of-work semantics.

Contract:
    - Events are staged with ``emit()`` inside ``unit_of_work()``
    - A unit of work that exits normally commits its staged events in
      emission order; one that raises discards them (no partial trail)
    - Nested units of work join the outermost one
    - Committed entries are immutable; no delete/update operations exist
    - Subscribers are called synchronously, after commit, in publish order
    - If persistence fails the committing call still succeeds (its state
      changes and in-memory entries stand), the failure is logged, and
      the journal becomes unavailable: every later unit of work is
      refused before it can mutate anything (fail-closed audit)

The journal's re-entrant lock is the single serialization point for the
whole store: every mutating entry point runs inside ``unit_of_work()``.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from kyc_ledger.core.enums import Topic
from kyc_ledger.core.errors import JournalUnavailable
from kyc_ledger.core.events import EVENT_TYPES, LedgerEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[LedgerEvent], None]


class EventJournal:
    """Ordered audit trail shared by every component of one ledger."""

    def __init__(
        self,
        persist_path: str | None = None,
        max_memory_entries: int = 100_000,
    ) -> None:
        self._entries: list[LedgerEvent] = []
        self._handlers: dict[Topic | None, list[EventHandler]] = defaultdict(list)
        self._persist_path = persist_path
        self._max = max_memory_entries
        self._available = True
        self._next_sequence = 0

        self._lock = threading.RLock()
        self._depth = 0
        self._staged: list[LedgerEvent] = []

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    @contextmanager
    def unit_of_work(self) -> Iterator[None]:
        """Serialize a call and make its notifications all-or-nothing."""
        with self._lock:
            if not self._available:
                raise JournalUnavailable("Audit journal is unavailable")
            outermost = self._depth == 0
            self._depth += 1
            try:
                yield
            except BaseException:
                if outermost:
                    discarded = len(self._staged)
                    self._staged = []
                    if discarded:
                        logger.debug("Discarded %d staged event(s)", discarded)
                raise
            finally:
                self._depth -= 1

            if outermost:
                committed = self._commit()
                self._dispatch(committed)

    def emit(self, event: LedgerEvent) -> None:
        """Stage an event for the current unit of work."""
        if self._depth == 0:
            raise RuntimeError("emit() called outside a unit of work")
        self._staged.append(event)

    @property
    def lock(self) -> threading.RLock:
        """The store-wide lock. Readers that need a consistent view hold it."""
        return self._lock

    def _commit(self) -> list[LedgerEvent]:
        staged, self._staged = self._staged, []
        for event in staged:
            event.sequence = self._next_sequence
            self._next_sequence += 1
        self._entries.extend(staged)

        if self._persist_path and staged:
            try:
                path = Path(self._persist_path)
                path.parent.mkdir(parents=True, exist_ok=True)
                with path.open("a") as f:
                    for event in staged:
                        f.write(event.model_dump_json() + "\n")
            except OSError:
                # The call's state changes are already applied in memory;
                # refuse the next call instead of failing this one.
                self._available = False
                logger.exception(
                    "Audit journal persistence failed; journal is now unavailable "
                    "(%d event(s) kept in memory only)", len(staged),
                )

        # Memory cap: evict oldest entries (the persisted file keeps all)
        if len(self._entries) > self._max:
            self._entries = self._entries[-self._max :]
        return staged

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------

    def subscribe(self, handler: EventHandler, topic: Topic | None = None) -> None:
        """Register a handler for one topic, or for every topic if None."""
        self._handlers[topic].append(handler)

    def _dispatch(self, events: list[LedgerEvent]) -> None:
        for event in events:
            handlers = self._handlers.get(event.topic, []) + self._handlers.get(None, [])
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "Handler error on topic=%s event=%s",
                        event.topic.value,
                        event.event_type,
                    )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read(
        self,
        topic: Topic | None = None,
        event_type: type[LedgerEvent] | None = None,
    ) -> list[LedgerEvent]:
        """Committed events in commit order, optionally filtered."""
        out = list(self._entries)
        if topic is not None:
            out = [e for e in out if e.topic == topic]
        if event_type is not None:
            out = [e for e in out if type(e) is event_type]
        return out

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def is_available(self) -> bool:
        return self._available

    def set_available(self, available: bool) -> None:
        """Toggle availability. Primary use: testing."""
        self._available = available

    @staticmethod
    def load(path: str | Path) -> list[LedgerEvent]:
        """Read a persisted JSONL journal back into event models.

        Lines with an unrecognized ``event_type`` are skipped (forward compat).
        """
        events: list[LedgerEvent] = []
        with Path(path).open() as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                data = json.loads(line)
                cls = EVENT_TYPES.get(data.get("event_type", ""))
                if cls is None:
                    logger.warning("Skipping unknown event type: %s", data.get("event_type"))
                    continue
                events.append(cls.model_validate(data))
        return events
