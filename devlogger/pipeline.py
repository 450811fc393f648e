"""Pipeline glue: split, classify, track, render, write."""

import logging
from datetime import timezone

from devlogger.classifier import classify
from devlogger.colors import Styler
from devlogger.config import Config
from devlogger.renderer import Renderer, escape_surrogates
from devlogger.splitter import iter_lines
from devlogger.tracker import GroupTracker, call_later

logger = logging.getLogger(__name__)


class DevLogger:
    """One formatting run: owns its tracker and writes to a text sink.

    A record that fails to render is written out as its raw line. Sink
    write errors (a closed pipe, say) are not caught here.
    """

    def __init__(self, sink, config: Config | None = None, schedule=call_later):
        self.config = config or Config()
        self.sink = sink
        self.renderer = Renderer(
            styler=Styler(enabled=self.config.color_enabled(sink)),
            tz=timezone.utc if self.config.utc else None,
            method_width=self.config.method_width,
            elapsed_width=self.config.elapsed_width,
        )
        self.tracker = GroupTracker(
            self.renderer,
            grace_seconds=self.config.grace_seconds,
            schedule=schedule,
        )
        self.lines_read = 0

    def process_line(self, line: str) -> None:
        self.lines_read += 1
        try:
            output = self.tracker.handle(classify(line))
        except (ValueError, OverflowError, UnicodeError) as e:
            logger.warning("Could not render line %d, passing it through: %s", self.lines_read, e)
            output = line
        if output is not None:
            self.sink.write(escape_surrogates(output) + "\n")
            self.sink.flush()

    async def run(self, stream) -> None:
        """Consume a binary stream to EOF."""
        async for line in iter_lines(stream):
            self.process_line(line)
        logger.debug(
            "Input exhausted after %d lines, %d groups still live",
            self.lines_read, len(self.tracker),
        )
