"""Newline-record counting over a byte stream.

A line is a maximal run of bytes without ``\\n``, terminated either by
``\\n`` or by the end of the stream.  ``\\r`` is an ordinary byte.  Counting
works chunk by chunk, so a line longer than any single chunk still counts
once.
"""

from typing import Iterable

_LF = b"\n"


def count_lines(chunks: Iterable[bytes]) -> int:
    """Return the number of lines in the concatenation of *chunks*.

    Equivalent to ``data.count(b"\\n") + (1 if data and not data.endswith(b"\\n") else 0)``
    without ever holding the whole payload in memory.
    """
    count = 0
    last_byte = b""
    for chunk in chunks:
        if not chunk:
            continue
        count += chunk.count(_LF)
        last_byte = chunk[-1:]

    # Unterminated final line.
    if last_byte and last_byte != _LF:
        count += 1
    return count
