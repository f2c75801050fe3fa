import asyncio
import logging
from typing import TYPE_CHECKING, AsyncIterator, Optional

import aiohttp

from .errors import DecodeError, ServiceError, StallTimeoutError, error_for_status
from .lines import iter_lines
from .message import StreamMessage, parse_message

if TYPE_CHECKING:
    from .builder import PreparedRequest

logger = logging.getLogger(__name__)

# RFC 7159, section 2
JSON_WHITESPACE = b" \t\n\r"


def is_blank(line: bytes) -> bool:
    return not line.strip(JSON_WHITESPACE)


async def open_stream(
    session: aiohttp.ClientSession,
    request: "PreparedRequest",
    timeout: Optional[float],
    owns_session: bool = False,
) -> "TwitterStream":
    """Send `request` and wrap the response once the status line says 200 OK."""
    # The connection is long-lived, so only the gap between reads is bounded.
    client_timeout = aiohttp.ClientTimeout(total=None, sock_connect=timeout, sock_read=timeout)
    logger.info("Connecting to %s %s", request.method, request.url)
    try:
        resp = await session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body or None,
            timeout=client_timeout,
        )
    except asyncio.TimeoutError as e:
        raise StallTimeoutError(f"Timed out connecting to {request.url}") from e
    except aiohttp.ClientError as e:
        raise ServiceError(str(e)) from e

    if resp.status != 200:
        logger.warning("Streaming API returned %s %s for %s", resp.status, resp.reason, request.url)
        resp.release()
        raise error_for_status(resp.status, resp.reason, resp)

    logger.info("Connected to %s", request.url)
    return TwitterStream(resp, session if owns_session else None)


class TwitterStream:
    """A listener for the Streaming API, yielding the raw JSON string of each message.

    Blank keep-alive lines are skipped, so every yielded string holds exactly one
    JSON value. Closing the stream (`aclose`, or leaving `async with`) drops the
    connection; iterating a closed stream ends right away.
    """

    resp: aiohttp.ClientResponse
    _session: Optional[aiohttp.ClientSession]
    _lines: Optional[AsyncIterator[bytes]]

    def __init__(
        self,
        resp: aiohttp.ClientResponse,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.resp = resp
        self._session = session
        self._lines = iter_lines(resp.content.iter_any())

    @property
    def closed(self) -> bool:
        return self._lines is None

    def __aiter__(self) -> "TwitterStream":
        return self

    async def __anext__(self) -> str:
        while self._lines is not None:
            try:
                line = await self._lines.__anext__()
            except StopAsyncIteration:
                logger.info("Stream ended by the server")
                await self.aclose()
                raise
            except asyncio.TimeoutError as e:
                await self.aclose()
                raise StallTimeoutError("Stream stalled") from e
            except aiohttp.ClientError as e:
                await self.aclose()
                raise ServiceError(str(e)) from e

            if is_blank(line):
                logger.debug("Received keep-alive")
                continue
            try:
                return line.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(line, e) from e
        raise StopAsyncIteration

    async def messages(self) -> AsyncIterator[StreamMessage]:
        """Yield each message parsed into a `StreamMessage`."""
        async for json_str in self:
            yield parse_message(json_str)

    async def aclose(self) -> None:
        if self._lines is None:
            return
        lines, self._lines = self._lines, None
        await lines.aclose()  # type: ignore[attr-defined]
        self.resp.close()
        if self._session is not None:
            await self._session.close()
            self._session = None
        logger.info("Stream closed")

    async def __aenter__(self) -> "TwitterStream":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
