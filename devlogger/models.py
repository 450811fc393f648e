"""Group and LogItem, the units the tracker buffers and the renderer draws."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from devlogger.colors import color_for
from devlogger.symbols import human_id, symbols_from_bytes


def parse_time(value) -> datetime | None:
    """Parse a record's ``time`` field into an aware datetime.

    Accepts ISO-8601 strings (a trailing ``Z`` included) and epoch
    milliseconds. Naive timestamps are taken as local time. Returns
    None when the value is missing or unparseable.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def elapsed_ms(start: datetime | None, end: datetime | None) -> float:
    """Milliseconds from *start* to *end*; 0 when either is unknown."""
    if start is None or end is None:
        return 0.0
    return (end - start).total_seconds() * 1000


@dataclass
class LogItem:
    record: dict
    label: str
    delta: float
    color: str

    @classmethod
    def from_record(cls, segments, record: dict, epoch: datetime | None) -> "LogItem":
        label = ":".join(segments[:-1])
        return cls(
            record=record,
            label=label,
            delta=elapsed_ms(epoch, parse_time(record.get("time"))),
            color=color_for(label),
        )

    @property
    def level(self) -> str:
        level = self.record.get("level")
        if level in ("error", "warn"):
            return level
        return "info"


@dataclass
class Group:
    """One request lifecycle: the start record plus everything logged under its id."""

    id: str
    origin: dict
    human_id: str = ""
    epoch: datetime | None = None
    entries: list[LogItem] = field(default_factory=list)
    closed: bool = False

    @classmethod
    def open(cls, group_id: str, origin: dict, symbols=symbols_from_bytes) -> "Group":
        return cls(
            id=group_id,
            origin=origin,
            human_id=human_id(group_id, symbols),
            epoch=parse_time(origin.get("time")),
        )

    def add(self, segments, record: dict) -> LogItem:
        """Build a LogItem timed against this group's epoch; buffer it while open."""
        item = LogItem.from_record(segments, record, self.epoch)
        if not self.closed:
            self.entries.append(item)
        return item
