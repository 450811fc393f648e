"""Shared fixtures for the devlogger test suite."""

import asyncio
import base64
import io
from datetime import timezone

import pytest

from devlogger.colors import Styler
from devlogger.config import Config
from devlogger.pipeline import DevLogger
from devlogger.renderer import Renderer

T0 = "2017-01-03T00:00:00.000Z"
T50 = "2017-01-03T00:00:50.000Z"


def make_id(n: int) -> str:
    """Ids in the upstream convention: base64 of a decimal counter."""
    return base64.b64encode(str(n).encode()).decode()


def start(group_id, method="GET", url="/foo", time=T0):
    return {"name": f"request:{group_id}", "req": {"method": method, "url": url}, "time": time}


def finish(group_id, status=200, latency=10, time=T0):
    return {"name": f"request:{group_id}", "statusCode": status, "latency": latency, "time": time}


class ManualScheduler:
    """Collects scheduled callbacks so tests decide when the grace window ends."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


class TextSink(io.StringIO):
    def isatty(self):
        return False


def encoding_sink():
    """A UTF-8 text sink over bytes, configured like main.py configures stdout."""
    return io.TextIOWrapper(io.BytesIO(), encoding="utf-8", errors="surrogateescape", newline="")


async def format_text(text: str, config: Config | None = None) -> str:
    """Run a whole input through a fresh pipeline and return what it wrote."""
    sink = encoding_sink()
    devlogger = DevLogger(sink, config or Config(utc=True))
    await devlogger.run(io.BytesIO(text.encode("utf-8", "surrogateescape")))
    return sink.buffer.getvalue().decode("utf-8", "surrogateescape")


@pytest.fixture
def renderer():
    return Renderer(styler=Styler(enabled=False), tz=timezone.utc)


@pytest.fixture
def color_renderer():
    return Renderer(styler=Styler(enabled=True), tz=timezone.utc)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def group_id():
    return make_id(1)
