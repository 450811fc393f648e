"""Record classifier: one input line in, one tagged event out."""

import json
from dataclasses import dataclass
from enum import Enum

REQUEST_LABEL = "request"
# Upstream ids are base64 and always carry two padding characters
GROUP_ID_SUFFIX = "=="


class EventKind(Enum):
    START = "start"
    FINISH = "finish"
    CHILD = "child"


@dataclass(frozen=True)
class PassThrough:
    """A line that is not JSON; emitted verbatim."""

    text: str


@dataclass(frozen=True)
class Standalone:
    """A JSON value with no usable group id."""

    record: object


@dataclass(frozen=True)
class GroupEvent:
    group_id: str
    segments: tuple
    record: dict
    kind: EventKind


def is_groupable_id(segment: str) -> bool:
    return bool(segment) and segment.endswith(GROUP_ID_SUFFIX)


def _carries(value) -> bool:
    # An empty object still marks the record
    return isinstance(value, dict) or bool(value)


def classify(line: str) -> PassThrough | Standalone | GroupEvent:
    """Classify a raw line. Never raises; unparseable input becomes PassThrough."""
    try:
        record = json.loads(line)
    except (ValueError, RecursionError):
        return PassThrough(line)

    if not isinstance(record, dict):
        return Standalone(record)

    name = record.get("name") or ""
    if not isinstance(name, str):
        return Standalone(record)

    segments = tuple(name.split(":"))
    group_id = segments[-1]
    if not is_groupable_id(group_id):
        return Standalone(record)

    if segments[0] == REQUEST_LABEL and _carries(record.get("req")):
        kind = EventKind.START
    elif segments[0] == REQUEST_LABEL and record.get("statusCode"):
        kind = EventKind.FINISH
    else:
        kind = EventKind.CHILD
    return GroupEvent(group_id=group_id, segments=segments, record=record, kind=kind)
