"""Shared stream fakes for copier and relay tests."""

from __future__ import annotations

import io


class ChunkedReader(io.RawIOBase):
    """Readable stream that hands out data in caller-chosen chunks.

    A chunk larger than the reader's buffer is split across reads, the way a
    pipe would deliver it.
    """

    def __init__(self, chunks):
        self._chunks = [bytes(c) for c in chunks if c]
        self.reads = 0

    def readable(self):
        return True

    def readinto(self, buffer):
        self.reads += 1
        if not self._chunks:
            return 0
        chunk = self._chunks[0]
        count = min(len(chunk), len(buffer))
        buffer[:count] = chunk[:count]
        if count == len(chunk):
            self._chunks.pop(0)
        else:
            self._chunks[0] = chunk[count:]
        return count


class FailingReader(io.RawIOBase):
    """Yields ``data`` once, then fails the next read."""

    def __init__(self, data=b"", error=None):
        self._data = data
        self._error = error or OSError(5, "Input/output error")

    def readable(self):
        return True

    def readinto(self, buffer):
        if self._data:
            count = len(self._data)
            buffer[:count] = self._data
            self._data = b""
            return count
        raise self._error


class FailingWriter(io.RawIOBase):
    """Writable stream whose every write fails."""

    def __init__(self, error=None):
        self._error = error or OSError(28, "No space left on device")

    def writable(self):
        return True

    def write(self, data):
        raise self._error


class PartialWriter(io.BytesIO):
    """Accepts at most ``limit`` bytes per write call, like a raw pipe."""

    def __init__(self, limit):
        super().__init__()
        self.limit = limit
        self.calls = 0

    def write(self, data):
        self.calls += 1
        return super().write(bytes(data[: self.limit]))


def chunked(data: bytes, size: int) -> list[bytes]:
    """Split ``data`` into consecutive pieces of ``size`` bytes."""
    return [data[i : i + size] for i in range(0, len(data), size)]
