from typing import Optional

import aiohttp


class TwitterStreamError(Exception):
    pass


class HTTPError(TwitterStreamError):
    status: int
    reason: Optional[str]
    resp: Optional[aiohttp.ClientResponse]

    def __init__(
        self,
        status: int,
        reason: Optional[str] = None,
        resp: Optional[aiohttp.ClientResponse] = None,
    ) -> None:
        self.status = status
        self.reason = reason
        self.resp = resp
        super().__init__(f"HTTP status code: {status}" + (f" {reason}" if reason else ""))


class AuthError(HTTPError):
    pass


class RatelimitError(HTTPError):
    pass


class FormattingError(HTTPError):
    pass


class ServiceError(TwitterStreamError):
    """Error from the underlying HTTP client while connecting or reading the body."""


class StallTimeoutError(ServiceError):
    pass


class DecodeError(TwitterStreamError):
    """Twitter returned a line that is not valid UTF-8."""

    line: bytes

    def __init__(self, line: bytes, cause: UnicodeDecodeError) -> None:
        self.line = line
        super().__init__(str(cause))


class MessageParseError(TwitterStreamError):
    pass


class ConfigError(TwitterStreamError):
    pass


def error_for_status(
    status: int, reason: Optional[str] = None, resp: Optional[aiohttp.ClientResponse] = None
) -> HTTPError:
    if status in (401, 403):
        return AuthError(status, reason, resp)
    if status in (420, 429):
        return RatelimitError(status, reason, resp)
    if status in (400, 406, 413, 416):
        return FormattingError(status, reason, resp)
    return HTTPError(status, reason, resp)
