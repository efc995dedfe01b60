"""Incremental decoder for the chat text/event-stream response.

Chunks arrive at arbitrary byte boundaries: a multi-byte character or a whole
event line may be split across two reads. The parser keeps undecoded bytes and
the trailing partial line between calls and only ever emits complete lines.
"""

import codecs
import json
import logging

from backend.app.models.events import SSE_DATA_PREFIX, StreamFrame, frame_from_payload

logger = logging.getLogger(__name__)


class StreamFrameParser:
    """Turns raw response bytes into event payloads and frames."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[str]:
        """Consume one chunk and return the complete, non-empty data payloads.

        Args:
            chunk: Next bytes from the transport

        Returns:
            Payload strings (text after the ``data:`` marker, trimmed), in order
        """
        self._buffer += self._decoder.decode(chunk)

        lines = self._buffer.split("\n")
        # Last element is the partial line (possibly empty); keep it for next time
        self._buffer = lines.pop()

        payloads = []
        for line in lines:
            line = line.rstrip("\r")
            if not line.startswith(SSE_DATA_PREFIX):
                continue
            payload = line[len(SSE_DATA_PREFIX) :].strip()
            if payload:
                payloads.append(payload)
        return payloads

    def feed_frames(self, chunk: bytes) -> list[StreamFrame]:
        """Consume one chunk and return the frames it completes.

        Payloads that are not valid JSON, or JSON that matches no frame shape,
        are skipped; the stream carries keep-alive noise.
        """
        frames = []
        for payload in self.feed(chunk):
            try:
                data = json.loads(payload)
            except json.JSONDecodeError:
                logger.debug(f"Skipping non-JSON event payload: {payload[:80]!r}")
                continue

            frame = frame_from_payload(data)
            if frame is None:
                logger.debug(f"Skipping unrecognised event payload: {payload[:80]!r}")
                continue
            frames.append(frame)
        return frames

    def close(self) -> None:
        """End of input: drop any carried-over partial event."""
        if self._buffer:
            logger.debug(f"Discarding {len(self._buffer)} chars of partial event at stream end")
        self._buffer = ""
        self._decoder.reset()
