"""Incremental ``data:`` line framing for streamed completion bodies.

Purpose
-------
Turn arbitrarily split chunks of a ``text/event-stream`` body into complete
:class:`StreamFrame` objects. Only complete ``\\n``-terminated lines become
frames; the trailing partial segment stays buffered until the next chunk.

Rules per complete line (after trimming whitespace):

- empty: dropped
- ``data: [DONE]``: terminal frame
- ``data: <payload>``: frame carrying ``<payload>``
- anything else (``event:``, ``id:``, comments): dropped

Notes
-----
- ``feed`` never raises for malformed text. ``feed_bytes`` decodes with a
  strict incremental UTF-8 decoder, so a multi-byte character split across
  chunks is handled and invalid bytes raise ``UnicodeDecodeError``.
- End of input discards the partial line (``finish``); cancellation discards
  it as well (``discard``) and closes the parser.
"""
from __future__ import annotations

import codecs
from typing import Iterable, Iterator, List, Optional

from ..constants import DATA_PREFIX, DONE_SENTINEL
from ..models import StreamFrame

_DONE_LINE = DATA_PREFIX + DONE_SENTINEL


def parse_line(line: str) -> Optional[StreamFrame]:
    """Classify one complete line; ``None`` when it yields no frame."""
    text = line.strip()
    if not text:
        return None
    if text == _DONE_LINE:
        return StreamFrame.done()
    if text.startswith(DATA_PREFIX):
        return StreamFrame(raw=text[len(DATA_PREFIX):])
    return None


class StreamFrameParser:
    """Long-lived session object holding the pending partial line."""

    def __init__(self) -> None:
        self._buffer = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
        self._closed = False

    @property
    def pending(self) -> str:
        """Buffered text not yet terminated by ``\\n``."""
        return self._buffer

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, chunk: str) -> List[StreamFrame]:
        """Append ``chunk`` and return the frames it completed, in order."""
        if self._closed:
            raise RuntimeError("frame parser is closed")
        if not chunk:
            return []
        segments = (self._buffer + chunk).split("\n")
        self._buffer = segments.pop()
        frames: List[StreamFrame] = []
        for line in segments:
            frame = parse_line(line)
            if frame is not None:
                frames.append(frame)
        return frames

    def feed_bytes(self, chunk: bytes) -> List[StreamFrame]:
        """Decode ``chunk`` as UTF-8 (incrementally) and feed the text."""
        if self._closed:
            raise RuntimeError("frame parser is closed")
        return self.feed(self._decoder.decode(chunk))

    def finish(self) -> int:
        """End of input: drop the partial line and return its length.

        Bytes still held by the decoder (an incomplete multi-byte sequence)
        are dropped with it.
        """
        dropped = len(self._buffer)
        self._buffer = ""
        self._decoder.reset()
        self._closed = True
        return dropped

    def discard(self) -> None:
        """Drop buffered input without surfacing it (cancellation path)."""
        self._buffer = ""
        self._decoder.reset()
        self._closed = True


def iter_frames(chunks: Iterable[str]) -> Iterator[StreamFrame]:
    """Yield frames lazily from an iterable of text chunks."""
    parser = StreamFrameParser()
    for chunk in chunks:
        yield from parser.feed(chunk)
    parser.finish()


__all__ = ["StreamFrameParser", "parse_line", "iter_frames"]
