"""Line splitting over byte streams, with raw bytes preserved."""

import asyncio
from typing import AsyncGenerator

ENCODING = "utf-8"
# Undecodable bytes survive the round trip to the output sink
ERRORS = "surrogateescape"
CHUNK_SIZE = 64 * 1024


class LineSplitter:
    """Accumulates byte chunks and hands back complete decoded lines.

    Lines are split on ``\\n`` with a trailing ``\\r`` dropped. Decoding
    happens per complete line so multi-byte characters spanning chunk
    boundaries are never cut.
    """

    def __init__(self):
        self._pending = b""

    def feed(self, chunk: bytes) -> list[str]:
        self._pending += chunk
        *complete, self._pending = self._pending.split(b"\n")
        return [self._decode(raw) for raw in complete]

    def finish(self) -> list[str]:
        """Flush a final unterminated fragment, if any."""
        rest, self._pending = self._pending, b""
        if not rest:
            return []
        return [self._decode(rest)]

    @staticmethod
    def _decode(raw: bytes) -> str:
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return raw.decode(ENCODING, ERRORS)


async def iter_lines(stream, chunk_size: int = CHUNK_SIZE) -> AsyncGenerator[str, None]:
    """Yield lines from a binary stream without blocking the event loop.

    Reads happen in the default executor, using ``read1`` where the
    stream has it so interactive pipes deliver lines as they arrive.
    """
    loop = asyncio.get_running_loop()
    read = getattr(stream, "read1", stream.read)
    splitter = LineSplitter()

    while True:
        chunk = await loop.run_in_executor(None, read, chunk_size)
        if not chunk:
            break
        for line in splitter.feed(chunk):
            yield line

    for line in splitter.finish():
        yield line
