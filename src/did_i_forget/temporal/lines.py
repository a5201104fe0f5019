"""Split a byte-chunk stream into text lines."""

from typing import Iterable, Iterator

NEWLINE = b"\n"


def split_lines(
    chunks: Iterable[bytes], encoding: str = "utf-8", errors: str = "surrogateescape"
) -> Iterator[str]:
    """Lazily decode *chunks* into lines split on ``\\n``.

    The buffer grows as needed, so arbitrarily long lines come through
    intact. A trailing fragment with no final newline is yielded last.
    Undecodable bytes are kept as surrogates and re-encode to the same
    bytes with the same *errors* handler.
    """
    buffer = bytearray()
    for chunk in chunks:
        if not chunk:
            continue
        buffer += chunk
        start = 0
        while True:
            end = buffer.find(NEWLINE, start)
            if end < 0:
                break
            yield buffer[start:end].decode(encoding, errors)
            start = end + 1
        if start:
            del buffer[:start]
    if buffer:
        yield buffer.decode(encoding, errors)
