"""Messages from the Streaming API.

`parse_message` turns one JSON string yielded by `TwitterStream` into one of the
message kinds below. Anything the parser does not know becomes `Custom`.

See https://developer.twitter.com/en/docs/tweets/filter-realtime/guides/streaming-message-types
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Union

from .datetime_parser import _JSONDecoder
from .errors import MessageParseError
from .twitter_typings import JsonObject, TwitterDirectMessage, TwitterTweet, TwitterUser


@dataclass
class Tweet:
    id: int
    text: str
    user: TwitterUser
    created_at: Optional[datetime]
    data: TwitterTweet = field(repr=False)

    @property
    def full_text(self) -> str:
        extended = self.data.get("extended_tweet")  # type: ignore[misc]
        if isinstance(extended, dict) and "full_text" in extended:
            return extended["full_text"]
        return self.data.get("full_text", self.text)


@dataclass
class Event:
    """A notification about a non-Tweet event, e.g. `favorite` or `follow`."""

    event: str
    created_at: Optional[datetime]
    source: TwitterUser
    target: TwitterUser
    target_object: Optional[JsonObject] = None


@dataclass
class Delete:
    id: int
    user_id: int


@dataclass
class ScrubGeo:
    user_id: int
    up_to_status_id: int


@dataclass
class Limit:
    """Number of undelivered Tweets since the connection was opened."""

    track: int


@dataclass
class StatusWithheld:
    id: int
    user_id: int
    withheld_in_countries: List[str]


@dataclass
class UserWithheld:
    id: int
    withheld_in_countries: List[str]


class DisconnectCode(IntEnum):
    SHUTDOWN = 1
    DUPLICATE_STREAM = 2
    CONTROL_REQUEST = 3
    STALL = 4
    NORMAL = 5
    TOKEN_REVOKED = 6
    ADMIN_LOGOUT = 7
    # 8 is reserved for internal use.
    MAX_MESSAGE_LIMIT = 9
    STREAM_EXCEPTION = 10
    BROKER_STALL = 11
    SHED_LOAD = 12


@dataclass
class Disconnect:
    code: DisconnectCode
    stream_name: str
    reason: str

    def __str__(self) -> str:
        return f"{self.stream_name}: {int(self.code)} {self.code.name}: {self.reason}"


class WarningCode(str, Enum):
    FALLING_BEHIND = "FALLING_BEHIND"
    FOLLOWS_OVER_LIMIT = "FOLLOWS_OVER_LIMIT"


@dataclass
class StreamWarning:
    code: Union[WarningCode, str]
    message: str
    percent_full: Optional[int] = None
    user_id: Optional[int] = None


@dataclass
class Friends:
    """IDs of the user's friends, sent once when a User Stream opens."""

    ids: List[int]


@dataclass
class FriendsStr:
    """`Friends` with string IDs, sent when `stringify_friend_ids` is set."""

    ids: List[str]


@dataclass
class DirectMessage:
    id: int
    text: str
    sender_id: int
    recipient_id: int
    data: TwitterDirectMessage = field(repr=False)


@dataclass
class Control:
    control_uri: str


@dataclass
class ForUser:
    """A Site Streams envelope."""

    for_user: Union[int, str]
    message: "StreamMessage"


@dataclass
class Custom:
    """A message not known to this library."""

    data: Any


StreamMessage = Union[
    Tweet,
    Event,
    Delete,
    ScrubGeo,
    Limit,
    StatusWithheld,
    UserWithheld,
    Disconnect,
    StreamWarning,
    Friends,
    FriendsStr,
    DirectMessage,
    Control,
    ForUser,
    Custom,
]


def parse_message(json_str: Union[str, bytes]) -> StreamMessage:
    """Parse one JSON string returned from the Streaming API."""
    try:
        value = json.loads(json_str, cls=_JSONDecoder)
    except ValueError as e:
        raise MessageParseError(f"Invalid JSON: {e}") from e
    return from_json(value)


def from_json(value: Any) -> StreamMessage:
    if not isinstance(value, dict) or not value:
        return Custom(value)

    first_key = next(iter(value))
    parse = _WRAPPERS.get(first_key)
    if parse is not None:
        return _guard(first_key, parse, value[first_key])

    # Tweet, Event or for_user envelope, in this order whatever the key order.
    if "id" in value:
        return _guard("tweet", _parse_tweet, value)
    if "event" in value:
        return _guard("event", _parse_event, value)
    if "for_user" in value:
        return _parse_for_user(value)
    return Custom(value)


def _parse_for_user(obj: Dict[str, Any]) -> ForUser:
    for_user = obj["for_user"]
    if isinstance(for_user, bool) or not isinstance(for_user, (int, str)):
        raise MessageParseError(f"Malformed `for_user` message: expected an id, got {for_user!r}")
    if "message" not in obj:
        raise MessageParseError("missing field `message` in for_user envelope")
    return ForUser(for_user, from_json(obj["message"]))


def _guard(kind: str, parse: Callable[[Any], Any], payload: Any) -> Any:
    try:
        return parse(payload)
    except (KeyError, TypeError, ValueError) as e:
        raise MessageParseError(f"Malformed `{kind}` message: {e!r}") from e


def _parse_tweet(obj: Dict[str, Any]) -> Tweet:
    return Tweet(
        id=int(obj["id"]),
        text=obj.get("text", obj.get("full_text", "")),
        user=obj["user"],
        created_at=_datetime(obj.get("created_at")),
        data=obj,  # type: ignore[arg-type]
    )


def _parse_event(obj: Dict[str, Any]) -> Event:
    return Event(
        event=obj["event"],
        created_at=_datetime(obj.get("created_at")),
        source=obj["source"],
        target=obj["target"],
        target_object=obj.get("target_object"),
    )


def _parse_delete(obj: Dict[str, Any]) -> Delete:
    status = obj["status"]
    return Delete(id=int(status["id"]), user_id=int(status["user_id"]))


def _parse_scrub_geo(obj: Dict[str, Any]) -> ScrubGeo:
    return ScrubGeo(user_id=int(obj["user_id"]), up_to_status_id=int(obj["up_to_status_id"]))


def _parse_limit(obj: Dict[str, Any]) -> Limit:
    return Limit(track=int(obj["track"]))


def _parse_status_withheld(obj: Dict[str, Any]) -> StatusWithheld:
    return StatusWithheld(
        id=int(obj["id"]),
        user_id=int(obj["user_id"]),
        withheld_in_countries=list(obj["withheld_in_countries"]),
    )


def _parse_user_withheld(obj: Dict[str, Any]) -> UserWithheld:
    return UserWithheld(id=int(obj["id"]), withheld_in_countries=list(obj["withheld_in_countries"]))


def _parse_disconnect(obj: Dict[str, Any]) -> Disconnect:
    return Disconnect(
        code=DisconnectCode(obj["code"]),
        stream_name=obj["stream_name"],
        reason=obj["reason"],
    )


def _parse_warning(obj: Dict[str, Any]) -> StreamWarning:
    raw_code = obj["code"]
    message = obj["message"]
    try:
        code: Union[WarningCode, str] = WarningCode(raw_code)
    except ValueError:
        return StreamWarning(code=raw_code, message=message)
    if code is WarningCode.FALLING_BEHIND:
        return StreamWarning(code=code, message=message, percent_full=int(obj["percent_full"]))
    return StreamWarning(code=code, message=message, user_id=int(obj["user_id"]))


def _parse_friends(ids: List[Any]) -> Friends:
    return Friends(ids=[int(user_id) for user_id in ids])


def _parse_friends_str(ids: List[Any]) -> FriendsStr:
    return FriendsStr(ids=[str(user_id) for user_id in ids])


def _parse_direct_message(obj: Dict[str, Any]) -> DirectMessage:
    return DirectMessage(
        id=int(obj["id"]),
        text=obj["text"],
        sender_id=int(obj["sender_id"]),
        recipient_id=int(obj["recipient_id"]),
        data=obj,  # type: ignore[arg-type]
    )


def _parse_control(obj: Dict[str, Any]) -> Control:
    return Control(control_uri=obj["control_uri"])


def _datetime(value: Any) -> Optional[datetime]:
    return value if isinstance(value, datetime) else None


_WRAPPERS: Dict[str, Callable[[Any], StreamMessage]] = {
    "delete": _parse_delete,
    "scrub_geo": _parse_scrub_geo,
    "limit": _parse_limit,
    "status_withheld": _parse_status_withheld,
    "user_withheld": _parse_user_withheld,
    "disconnect": _parse_disconnect,
    "warning": _parse_warning,
    "friends": _parse_friends,
    "friends_str": _parse_friends_str,
    "direct_message": _parse_direct_message,
    "control": _parse_control,
}
