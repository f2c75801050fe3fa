from typing import AsyncIterable, AsyncIterator

CRLF = b"\r\n"


async def iter_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[bytes]:
    """Split a stream of byte chunks into lines delimited by CRLF.

    The delimiter is stripped from each line. A lone `\\r` or `\\n` is kept as
    part of the line, and a CRLF may be split across two chunks. Whatever is
    left in the buffer when the body ends is yielded as a last line, unless it
    is empty.
    """
    buf = bytearray()
    async for chunk in chunks:
        if not chunk:
            continue
        # A CR at the end of the previous chunk may pair with a leading LF.
        start = max(len(buf) - 1, 0)
        buf += chunk
        while True:
            i = buf.find(CRLF, start)
            if i < 0:
                break
            line = bytes(buf[:i])
            del buf[: i + 2]
            start = 0
            yield line
    if buf:
        yield bytes(buf)
