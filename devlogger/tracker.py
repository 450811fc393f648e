"""Group tracker — correlates request start/finish records and buffers what's between."""

import asyncio
import logging
from typing import Callable

from devlogger.classifier import EventKind, GroupEvent, PassThrough, Standalone
from devlogger.models import Group
from devlogger.renderer import Renderer

logger = logging.getLogger(__name__)

GRACE_SECONDS = 0.033

Scheduler = Callable[[float, Callable[[], None]], object]


def call_later(delay: float, callback: Callable[[], None]):
    """Schedule *callback* on the running asyncio loop."""
    return asyncio.get_running_loop().call_later(delay, callback)


class GroupTracker:
    """Owns the live groups for one pipeline run.

    Lifecycle of a group id:
    - a start record opens a Group; child records are buffered on it
    - the matching finish record closes it and flushes one rendered block
    - ``grace_seconds`` later the id is evicted; children arriving in
      between render on their own, tagged "(after <human id>)"

    Out-of-order input never raises:
    - a finish for an unknown id is dropped
    - a repeated start is logged as a child of the live group
    - a child with no live group is rendered standalone
    """

    def __init__(
        self,
        renderer: Renderer,
        grace_seconds: float = GRACE_SECONDS,
        schedule: Scheduler = call_later,
    ) -> None:
        self.renderer = renderer
        self.grace_seconds = grace_seconds
        self._schedule = schedule
        self._groups: dict[str, Group] = {}

    def __contains__(self, group_id: str) -> bool:
        return group_id in self._groups

    def __len__(self) -> int:
        return len(self._groups)

    def get(self, group_id: str) -> Group | None:
        return self._groups.get(group_id)

    def handle(self, event) -> str | None:
        """Dispatch one classified event. Returns text to emit, or None."""
        if isinstance(event, PassThrough):
            return event.text
        if isinstance(event, Standalone):
            return self.renderer.render_standalone(event.record)
        if isinstance(event, GroupEvent):
            if event.kind is EventKind.START:
                return self.on_start(event.group_id, event.segments, event.record)
            if event.kind is EventKind.FINISH:
                return self.on_finish(event.group_id, event.record)
            return self.on_child(event.group_id, event.segments, event.record)
        raise TypeError(f"Unknown event type: {type(event).__name__}")

    def on_start(self, group_id: str, segments, record: dict) -> str | None:
        if group_id in self._groups:
            logger.debug("Repeated start for %s, logging it as a child", group_id)
            return self.on_child(group_id, segments, record)
        self._groups[group_id] = Group.open(group_id, record)
        return None

    def on_finish(self, group_id: str, record: dict) -> str | None:
        group = self.get(group_id)
        if group is None or group.closed:
            logger.debug("Ignoring finish for unknown or closed group %s", group_id)
            return None

        group.closed = True
        self._schedule(self.grace_seconds, lambda: self._evict(group))
        return self.renderer.render_block(group, record)

    def on_child(self, group_id: str, segments, record: dict) -> str | None:
        group = self.get(group_id)
        if group is None:
            logger.debug("No live group for %s, rendering standalone", group_id)
            return self.renderer.render_standalone(record)

        item = group.add(segments, record)
        if group.closed:
            return self.renderer.render_late(item, group)
        return None

    def _evict(self, group: Group) -> None:
        if self.get(group.id) is group:
            del self._groups[group.id]
            logger.debug("Evicted group %s", group.id)
