"""Line framing for the IntelliCenter stream.

The controller sends one JSON message per line but TCP gives no guarantee
that a read ends on a line boundary. The FrameAssembler buffers partial data
until a chunk ending with the terminator arrives.
"""

from __future__ import annotations

from .exceptions import FrameOverflowError

LINE_TERMINATOR = b"\n"

# 1MB, enough for the largest hardware definition answer
DEFAULT_MAX_BUFFER_SIZE = 1_048_576


class FrameAssembler:
    """Turn arbitrary chunks of bytes into complete protocol lines."""

    def __init__(self, max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE) -> None:
        self._max_buffer_size = max_buffer_size
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Return the number of buffered bytes not yet emitted."""
        return len(self._buffer)

    def reset(self) -> None:
        """Discard any partial line."""
        self._buffer.clear()

    def feed(self, chunk: bytes) -> list[bytes]:
        """Consume a chunk and return the complete lines it finishes.

        Lines are returned without their terminator (and without a trailing
        carriage return); empty lines are dropped.

        Raises:
            FrameOverflowError: If the buffer grew past its limit without a
                terminator. The buffer has been discarded when this is raised,
                so the next chunk starts fresh.
        """
        self._buffer += chunk

        if not chunk.endswith(LINE_TERMINATOR):
            if len(self._buffer) > self._max_buffer_size:
                size = len(self._buffer)
                self._buffer.clear()
                raise FrameOverflowError(size, self._max_buffer_size)
            return []

        data = bytes(self._buffer)
        self._buffer.clear()

        lines = []
        for segment in data.split(LINE_TERMINATOR):
            line = segment.rstrip(b"\r")
            if line:
                lines.append(line)
        return lines
