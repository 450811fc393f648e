"""Renderer — request headers, buffered log lines, and standalone dumps."""

import math
import re
from datetime import tzinfo

from devlogger.colors import Styler, strip_ansi
from devlogger.durations import format_duration
from devlogger.models import Group, LogItem

# Widest method we expect to line up: "DELETE"
METHOD_WIDTH = 6
ELAPSED_WIDTH = 8
BADGE_WIDTH = 3

BADGES = {
    "error": ("ERR", ("bg_red", "white")),
    "warn": ("WRN", ("bg_yellow", "black")),
    "info": ("LOG", ("bg_cyan", "black")),
}

INSPECT_DEPTH = 2
INSPECT_BREAK = 72
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
# Lone surrogates from JSON \u escapes; U+DC80..U+DCFF are raw input bytes and stay
_LONE_SURROGATE = re.compile("[\ud800-\udc7f\udd00-\udfff]")


def finite_ms(value) -> float | None:
    """A millisecond count as a finite float, or None when it can't be one."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    return value if math.isfinite(value) else None


def escape_surrogates(text: str) -> str:
    """Spell out lone surrogates as \\uXXXX so the text can be encoded."""
    return _LONE_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def resolve_message(record: dict) -> str:
    """Pick the text a log line shows: error, then request line, then message."""
    err = record.get("err")
    if isinstance(err, dict) or err:
        detail = err if isinstance(err, dict) else {}
        return str(detail.get("stack") or detail.get("message") or "Unknown Error")

    req = record.get("req")
    if isinstance(req, dict) or req:
        detail = req if isinstance(req, dict) else {}
        return f"{detail.get('method', '')} {detail.get('url', '')}"

    message = record.get("message")
    return str(message) if message else "Unknown message"


class Renderer:
    """Turns groups, items and bare records into terminal text.

    Holds presentation options only; every method is a pure function of
    its arguments.
    """

    def __init__(
        self,
        styler: Styler | None = None,
        tz: tzinfo | None = None,
        method_width: int = METHOD_WIDTH,
        elapsed_width: int = ELAPSED_WIDTH,
    ):
        self.style = styler or Styler(enabled=False)
        self.tz = tz
        self.method_width = method_width
        self.elapsed_width = elapsed_width

    # -- grouped output ------------------------------------------------

    def render_header(self, group: Group, finish: dict) -> str:
        req = group.origin.get("req")
        req = req if isinstance(req, dict) else {}
        latency = finite_ms(finish.get("latency"))
        latency_text = "-" if latency is None else format_duration(latency)

        return " ".join([
            self.style(self._time_of_day(group), "underline", "gray"),
            self._status(finish.get("statusCode")),
            self.style(latency_text.rjust(self.elapsed_width), "gray"),
            str(req.get("method", "")).rjust(self.method_width),
            self.style(req.get("url", ""), "underline"),
            f"(id: {group.human_id})",
        ])

    def render_item(self, item: LogItem) -> str:
        delta = finite_ms(item.delta)
        elapsed = f"+{format_duration(0 if delta is None else delta)}".rjust(self.elapsed_width)
        text, badge_styles = BADGES[item.level]
        is_error = item.level == "error"
        indent = " " * (len(elapsed) + BADGE_WIDTH + len(item.label) + 3)

        lines = []
        for idx, line in enumerate(resolve_message(item.record).split("\n")):
            if idx > 0:
                line = line.strip()
            if is_error:
                line = self.style(line, "bg_red", "white") if idx == 0 else self.style(line, "gray")
            lines.append(line if idx == 0 else indent + line)

        return " ".join([
            self.style(elapsed, "gray"),
            self.style(text, *badge_styles),
            self.style(item.label, item.color),
            "\n".join(lines),
        ])

    def render_late(self, item: LogItem, group: Group) -> str:
        """An item that arrived after its group was flushed."""
        return f"{self.render_item(item)} (after {group.human_id})"

    def render_block(self, group: Group, finish: dict) -> str:
        header = self.render_header(group, finish)
        if not group.entries:
            return header
        body = "\n".join(self.render_item(item) for item in group.entries)
        return header + "\n" + body.replace(group.id, group.human_id)

    def _time_of_day(self, group: Group) -> str:
        if group.epoch is None:
            return "--:--:--"
        return group.epoch.astimezone(self.tz).strftime("%H:%M:%S")

    def _status(self, code) -> str:
        if isinstance(code, bool) or not isinstance(code, (int, float)):
            return self.style(code, "yellow")
        if code < 300:
            return self.style(code, "green")
        if code < 399:
            return self.style(code, "bg_green", "white")
        if code < 499:
            return self.style(code, "yellow")
        return self.style(code, "bg_red", "white")

    # -- standalone output ---------------------------------------------

    def render_standalone(self, record) -> str:
        return self._inspect(record, 0, 0)

    def _inspect(self, value, depth: int, indent: int) -> str:
        if value is None:
            return self.style("null", "bold")
        if isinstance(value, bool):
            return self.style("true" if value else "false", "yellow")
        if isinstance(value, (int, float)):
            return self.style(_number(value), "yellow")
        if isinstance(value, str):
            return self.style(_quote(value), "green")
        if isinstance(value, dict):
            if not value:
                return "{}"
            if depth > INSPECT_DEPTH:
                return self.style("[Object]", "cyan")
            parts = [
                f"{_key(key)}: {self._inspect(item, depth + 1, indent + 2)}"
                for key, item in value.items()
            ]
            return self._wrap("{", parts, "}", indent)
        if isinstance(value, list):
            if not value:
                return "[]"
            if depth > INSPECT_DEPTH:
                return self.style("[Array]", "cyan")
            parts = [self._inspect(item, depth + 1, indent + 2) for item in value]
            return self._wrap("[", parts, "]", indent)
        return str(value)

    @staticmethod
    def _wrap(opening: str, parts: list[str], closing: str, indent: int) -> str:
        single = f"{opening} {', '.join(parts)} {closing}"
        if "\n" not in single and indent + len(strip_ansi(single)) <= INSPECT_BREAK:
            return single
        pad = " " * (indent + 2)
        body = ",\n".join(pad + part for part in parts)
        return f"{opening}\n{body}\n{' ' * indent}{closing}"


def _key(key: str) -> str:
    return key if _IDENTIFIER.match(key) else _quote(key)


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def _number(value) -> str:
    if isinstance(value, float):
        if value != value:
            return "NaN"
        if value in (float("inf"), float("-inf")):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)
