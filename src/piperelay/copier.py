"""Byte copier that drops a trailing legacy end-of-file marker.

Old text-mode tools terminate their output with a SUB byte (0x1A). The
copier relays a stream verbatim except for that byte when it is the very
last byte of the whole stream. Whether a chunk is the last one is only known
after the next read returns nothing, so the most recent chunk is always held
back until a further read proves it was not the tail:

    read A -> hold A
    read B -> write A, hold B
    read 0 -> trim marker from B, write B

Two fixed buffers swap roles, so memory stays bounded no matter how long
the stream runs.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

logger = logging.getLogger(__name__)

MARKER_BYTE = 0x1A
DEFAULT_BUFFER_SIZE = 8192


def _read_into(source: BinaryIO, buffer: bytearray) -> int:
    """Fill ``buffer`` with at most one underlying read; 0 means EOF."""
    readinto = getattr(source, "readinto1", None) or getattr(source, "readinto", None)
    with memoryview(buffer) as view:
        if readinto is not None:
            count = readinto(view)
        else:
            chunk = source.read(len(buffer))
            count = len(chunk)
            view[:count] = chunk
    return count or 0


def _write_all(destination: BinaryIO, buffer: bytearray, length: int) -> int:
    """Write ``buffer[:length]``, looping over partial writes."""
    with memoryview(buffer) as view:
        offset = 0
        while offset < length:
            written = destination.write(view[offset:length])
            if written is None:
                # File-likes that don't report a count take the whole chunk
                break
            offset += written
    destination.flush()
    return length


def copy_stream_removing_eof_marker(
    source: BinaryIO,
    destination: BinaryIO,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Copy ``source`` to ``destination`` minus a final 0x1A byte.

    Only a marker that is the last byte of the entire source is removed.
    Markers anywhere else, including at the end of an intermediate read, are
    copied unchanged. The result does not depend on how the source chunks
    its reads.

    Args:
        source: Readable binary stream
        destination: Writable binary stream
        buffer_size: Capacity of each of the two buffers

    Returns:
        Number of bytes written to ``destination``

    Raises:
        ValueError: If ``buffer_size`` is not positive
        OSError: If a read or write fails; nothing is retried
    """
    if buffer_size <= 0:
        raise ValueError(f"buffer_size must be positive, got {buffer_size}")

    current = bytearray(buffer_size)
    prior = bytearray(buffer_size)
    prior_length = 0
    reads = 0
    written = 0

    while True:
        count = _read_into(source, current)
        if count == 0:
            break
        if reads > 0:
            # Another read succeeded, so the held chunk was not the tail
            written += _write_all(destination, prior, prior_length)
        current, prior = prior, current
        prior_length = count
        reads += 1

    if prior_length > 0:
        if prior[prior_length - 1] == MARKER_BYTE:
            prior_length -= 1
            logger.debug("Dropped trailing EOF marker after %d reads", reads)
        if prior_length > 0:
            written += _write_all(destination, prior, prior_length)

    return written


__all__ = ["DEFAULT_BUFFER_SIZE", "MARKER_BYTE", "copy_stream_removing_eof_marker"]
