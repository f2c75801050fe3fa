"""A library for listening on Twitter Streaming API.

    import asyncio
    from twitter_stream import Token, track

    async def main() -> None:
        token = Token("consumer_key", "consumer_secret", "access_key", "access_secret")
        async with await track("@Twitter", token) as stream:
            async for json_str in stream:
                print(json_str)

    asyncio.run(main())

The stream yields the raw JSON strings returned by the Streaming API, one JSON
value each. Blank keep-alive lines are discarded. Use `TwitterStream.messages()`
or `parse_message` to decode them into `twitter_stream.message` types.
"""

from .builder import (
    BoundingBox,
    Builder,
    FilterLevel,
    PreparedRequest,
    With,
    follow,
    locations,
    sample,
    track,
)
from .config import __version__
from .errors import (
    AuthError,
    ConfigError,
    DecodeError,
    FormattingError,
    HTTPError,
    MessageParseError,
    RatelimitError,
    ServiceError,
    StallTimeoutError,
    TwitterStreamError,
)
from .message import StreamMessage, parse_message
from .stream import TwitterStream
from .token import Token

__all__ = [
    "AuthError",
    "BoundingBox",
    "Builder",
    "ConfigError",
    "DecodeError",
    "FilterLevel",
    "FormattingError",
    "HTTPError",
    "MessageParseError",
    "PreparedRequest",
    "RatelimitError",
    "ServiceError",
    "StallTimeoutError",
    "StreamMessage",
    "Token",
    "TwitterStream",
    "TwitterStreamError",
    "With",
    "__version__",
    "follow",
    "locations",
    "parse_message",
    "sample",
    "track",
]
