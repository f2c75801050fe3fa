"""A `Builder` for `TwitterStream`.

The Streaming API has two public endpoints: `POST statuses/filter` and
`GET statuses/sample`. `Builder` picks one from the configured parameters:
when any of `follow`, `track` and `locations` is set, `filter` is used,
otherwise `sample`. An explicit endpoint set by `endpoint()` or by the
`filter()`, `sample()` and `user()` constructors always wins.

Example:

    token = Token("consumer_key", "consumer_secret", "access_key", "access_secret")
    tokyo = [BoundingBox(139.56, 35.53, 139.92, 35.82)]

    async with await Builder(token).locations(tokyo).language("en").listen() as stream:
        async for json_str in stream:
            print(json_str)
"""

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union
from urllib.parse import quote, urlencode

import aiohttp

from . import config
from .stream import TwitterStream, open_stream
from .token import Token
from .twitter_typings import StreamParams

logger = logging.getLogger(__name__)

FILTER = "https://stream.twitter.com/1.1/statuses/filter.json"
SAMPLE = "https://stream.twitter.com/1.1/statuses/sample.json"
USER = "https://userstream.twitter.com/1.1/user.json"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

Endpoint = Tuple[str, str]


class BoundingBox(NamedTuple):
    """A rectangular area on the globe, given by its southwest and northeast
    corners in decimal degrees."""

    west_longitude: float
    south_latitude: float
    east_longitude: float
    north_latitude: float

    @classmethod
    def from_points(
        cls, southwest: Tuple[float, float], northeast: Tuple[float, float]
    ) -> "BoundingBox":
        """Create a box from two `(longitude, latitude)` pairs."""
        return cls(southwest[0], southwest[1], northeast[0], northeast[1])

    @staticmethod
    def flatten(boxes: Iterable["BoundingBox"]) -> List[float]:
        return [coord for box in boxes for coord in box]

    @classmethod
    def unflatten(cls, rows: Iterable[Sequence[float]]) -> List["BoundingBox"]:
        """Create boxes from rows of `[west, south, east, north]`, e.g. loaded from JSON."""
        boxes = []
        for row in rows:
            if len(row) != 4:
                raise ValueError(f"a bounding box needs 4 coordinates, got {len(row)}")
            boxes.append(cls(*(float(coord) for coord in row)))
        return boxes


class FilterLevel(str, Enum):
    # https://developer.twitter.com/en/docs/tweets/filter-realtime/guides/basic-stream-parameters#filter-level
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"

    def __str__(self) -> str:
        return self.value


class With(str, Enum):
    """Types of messages delivered to User Stream clients."""

    USER = "user"
    FOLLOWINGS = "followings"

    def __str__(self) -> str:
        return self.value


@dataclass
class Parameters:
    stall_warnings: bool = False
    filter_level: Optional[FilterLevel] = None
    language: str = ""
    follow: List[int] = field(default_factory=list)
    track: str = ""
    locations: List[BoundingBox] = field(default_factory=list)
    count: Optional[int] = None
    with_: Optional[With] = None
    replies: bool = False
    stringify_friend_ids: bool = False

    def is_filter(self) -> bool:
        return bool(self.follow or self.track or self.locations)

    def encode(self) -> StreamParams:
        params: StreamParams = {}
        if self.stall_warnings:
            params["stall_warnings"] = "true"
        if self.filter_level is not None:
            params["filter_level"] = self.filter_level.value
        if self.language:
            params["language"] = self.language
        if self.follow:
            params["follow"] = ",".join(str(user_id) for user_id in self.follow)
        if self.track:
            params["track"] = self.track
        if self.locations:
            params["locations"] = ",".join(
                format_coordinate(coord) for coord in BoundingBox.flatten(self.locations)
            )
        if self.count is not None:
            params["count"] = str(self.count)
        if self.with_ is not None:
            params["with"] = self.with_.value
        if self.replies:
            params["replies"] = "all"
        if self.stringify_friend_ids:
            params["stringify_friend_ids"] = "true"
        return params


class PreparedRequest(NamedTuple):
    method: str
    url: str
    headers: Dict[str, str]
    body: bytes


def format_coordinate(coord: float) -> str:
    # Plain decimal notation; `repr` would give e.g. `1e-05`.
    return format(Decimal(repr(float(coord))), "f")


class Builder:
    """A builder for `TwitterStream`. Every setter returns the builder itself."""

    _token: Token
    _endpoint: Optional[Endpoint]
    parameters: Parameters
    _timeout: Optional[float]
    _user_agent: Optional[str]
    _gzip: bool
    _handle: Optional[aiohttp.ClientSession]

    def __init__(self, token: Token) -> None:
        self._token = token
        self._endpoint = None
        self.parameters = Parameters()
        self._timeout = config.DEFAULT_TIMEOUT
        self._user_agent = config.DEFAULT_USER_AGENT
        self._gzip = True
        self._handle = None

    @classmethod
    def filter(cls, token: Token) -> "Builder":
        """Create a builder for the `POST statuses/filter` endpoint."""
        return cls(token).endpoint(("POST", FILTER))

    @classmethod
    def sample(cls, token: Token) -> "Builder":
        """Create a builder for the `GET statuses/sample` endpoint."""
        return cls(token).endpoint(("GET", SAMPLE))

    @classmethod
    def user(cls, token: Token) -> "Builder":
        """Create a builder for the `GET user` endpoint (User Streams)."""
        return cls(token).endpoint(("GET", USER))

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Builder":
        """Create a builder with credentials, timeout and user agent read from the environment."""
        token = Token.from_env(dotenv_path)
        return cls(token).timeout(config.read_timeout()).user_agent(config.read_user_agent())

    def copy(self) -> "Builder":
        ret = Builder(self._token)
        ret._endpoint = self._endpoint
        ret.parameters = replace(
            self.parameters,
            follow=list(self.parameters.follow),
            locations=list(self.parameters.locations),
        )
        ret._timeout = self._timeout
        ret._user_agent = self._user_agent
        ret._gzip = self._gzip
        ret._handle = self._handle
        return ret

    # Connection settings

    def endpoint(self, endpoint: Optional[Endpoint]) -> "Builder":
        """Set the `(method, url)` to connect to, or `None` to pick it from the parameters."""
        if endpoint is not None:
            method, url = endpoint
            endpoint = (method.upper(), url)
        self._endpoint = endpoint
        return self

    def token(self, token: Token) -> "Builder":
        self._token = token
        return self

    def timeout(self, timeout: Optional[float]) -> "Builder":
        """Set the read timeout in seconds. `None` waits forever."""
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")
        self._timeout = timeout
        return self

    def user_agent(self, user_agent: Optional[str]) -> "Builder":
        self._user_agent = user_agent
        return self

    def gzip(self, gzip: bool) -> "Builder":
        self._gzip = gzip
        return self

    def handle(self, session: Optional[aiohttp.ClientSession]) -> "Builder":
        """Set the session used by `listen`. The session stays owned by the caller."""
        self._handle = session
        return self

    # Streaming API parameters
    # https://developer.twitter.com/en/docs/tweets/filter-realtime/guides/basic-stream-parameters

    def stall_warnings(self, stall_warnings: bool) -> "Builder":
        self.parameters.stall_warnings = stall_warnings
        return self

    def filter_level(self, filter_level: Union[FilterLevel, str, None]) -> "Builder":
        self.parameters.filter_level = None if filter_level is None else FilterLevel(filter_level)
        return self

    def language(self, language: str) -> "Builder":
        """Comma separated language identifiers. An empty string unsets it."""
        self.parameters.language = language
        return self

    def follow(self, follow: Iterable[int]) -> "Builder":
        """User IDs whose Tweets to deliver. An empty list unsets it."""
        self.parameters.follow = [int(user_id) for user_id in follow]
        return self

    def track(self, track: Union[str, Iterable[str]]) -> "Builder":
        """Comma separated phrases, or an iterable of phrases. Empty unsets it."""
        if not isinstance(track, str):
            track = ",".join(track)
        self.parameters.track = track
        return self

    def locations(
        self, locations: Iterable[Union[BoundingBox, Sequence[float]]]
    ) -> "Builder":
        """Bounding boxes to filter Tweets by. An empty list unsets it."""
        self.parameters.locations = [
            loc if isinstance(loc, BoundingBox) else BoundingBox.unflatten([loc])[0]
            for loc in locations
        ]
        return self

    def count(self, count: Optional[int]) -> "Builder":
        self.parameters.count = count
        return self

    def with_(self, with_: Union[With, str, None]) -> "Builder":
        self.parameters.with_ = None if with_ is None else With(with_)
        return self

    def replies(self, replies: bool) -> "Builder":
        """Receive all @replies on a User Stream."""
        self.parameters.replies = replies
        return self

    def stringify_friend_ids(self, stringify_friend_ids: bool) -> "Builder":
        """Send the User Stream's friends list as `friends_str`, with string IDs."""
        self.parameters.stringify_friend_ids = stringify_friend_ids
        return self

    # Requests

    def resolve_endpoint(self) -> Endpoint:
        if self._endpoint is not None:
            return self._endpoint
        if self.parameters.is_filter():
            return ("POST", FILTER)
        return ("GET", SAMPLE)

    def prepare_request(self, **oauth_kwargs) -> PreparedRequest:
        """Build the signed request. `oauth_kwargs` go to `oauthlib.oauth1.Client`
        (e.g. a fixed `nonce` and `timestamp`)."""
        method, url = self.resolve_endpoint()
        query = urlencode(self.parameters.encode(), quote_via=quote)
        client = self._token.oauth_client(**oauth_kwargs)

        headers: Dict[str, str] = {}
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        headers["Accept-Encoding"] = "gzip" if self._gzip else "identity"

        if method == "POST":
            headers["Content-Type"] = FORM_CONTENT_TYPE
            _, signed_headers, body = client.sign(
                url, http_method=method, body=query, headers=headers
            )
            return PreparedRequest(method, url, dict(signed_headers), (body or "").encode("ascii"))

        if query:
            url = f"{url}?{query}"
        url, signed_headers, _ = client.sign(url, http_method=method, headers=headers)
        return PreparedRequest(method, url, dict(signed_headers), b"")

    async def listen(self) -> TwitterStream:
        """Connect to the endpoint and return a stream of JSON strings.

        Uses the session set by `handle`, or a new session that the returned
        stream closes along with the connection.
        """
        if self._handle is not None:
            return await self.listen_with_client(self._handle)
        session = aiohttp.ClientSession()
        try:
            return await open_stream(
                session, self.prepare_request(), self._timeout, owns_session=True
            )
        except BaseException:
            await session.close()
            raise

    async def listen_with_client(self, session: aiohttp.ClientSession) -> TwitterStream:
        """Same as `listen`, using `session` to make the request."""
        return await open_stream(session, self.prepare_request(), self._timeout)


def follow(follow: Iterable[int], token: Token):
    """Connect to the filter stream, yielding Tweets from the given users."""
    return Builder(token).follow(follow).listen()


def track(track: Union[str, Iterable[str]], token: Token):
    """Connect to the filter stream, yielding Tweets matching `track`."""
    return Builder(token).track(track).listen()


def locations(locations: Iterable[Union[BoundingBox, Sequence[float]]], token: Token):
    """Connect to the filter stream, yielding geolocated Tweets within the given boxes."""
    return Builder(token).locations(locations).listen()


def sample(token: Token):
    """Connect to the sample stream, yielding a small random sample of public Tweets."""
    return Builder(token).listen()
