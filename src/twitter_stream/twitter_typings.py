from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from typing_extensions import NotRequired, TypedDict

JsonObject = Dict[str, Any]

FilterLevelName = Literal["none", "low", "medium"]

# https://developer.twitter.com/en/docs/tweets/filter-realtime/guides/basic-stream-parameters
StreamParams = TypedDict(
    "StreamParams",
    {
        "stall_warnings": NotRequired[Literal["true"]],
        "filter_level": NotRequired[FilterLevelName],
        "language": NotRequired[str],
        "follow": NotRequired[str],  # comma separated user ids
        "track": NotRequired[str],  # comma separated phrases
        "locations": NotRequired[str],  # comma separated sw/ne coordinates
        "count": NotRequired[str],  # Elevated Access Only
        "with": NotRequired[Literal["user", "followings"]],  # User Streams Only
        "replies": NotRequired[Literal["all"]],  # User Streams Only
        "stringify_friend_ids": NotRequired[Literal["true"]],  # User Streams Only
    },
)


# https://developer.twitter.com/en/docs/twitter-api/v1/data-dictionary/object-model/user
class TwitterUser(TypedDict, total=False):
    id: int
    id_str: str
    name: str
    screen_name: str
    location: Optional[str]
    url: Optional[str]
    description: Optional[str]
    protected: bool
    verified: bool
    followers_count: int
    friends_count: int
    listed_count: int
    favourites_count: int
    statuses_count: int
    created_at: datetime
    lang: Optional[str]


class UserMention(TypedDict, total=False):
    id: int
    id_str: str
    name: str
    screen_name: str
    indices: List[int]


class Hashtag(TypedDict):
    text: str
    indices: List[int]


# https://developer.twitter.com/en/docs/twitter-api/v1/data-dictionary/object-model/entities
class TwitterEntities(TypedDict, total=False):
    hashtags: List[Hashtag]
    urls: List[JsonObject]
    user_mentions: List[UserMention]
    symbols: List[JsonObject]
    media: List[JsonObject]


# https://developer.twitter.com/en/docs/twitter-api/v1/data-dictionary/object-model/tweet
class TwitterTweet(TypedDict, total=False):
    id: int
    id_str: str
    created_at: datetime
    text: str
    full_text: str
    source: str
    truncated: bool
    in_reply_to_status_id: Optional[int]
    in_reply_to_user_id: Optional[int]
    in_reply_to_screen_name: Optional[str]
    user: TwitterUser
    coordinates: Optional[JsonObject]
    place: Optional[JsonObject]
    quoted_status: "TwitterTweet"
    retweeted_status: "TwitterTweet"
    entities: TwitterEntities
    favorite_count: Optional[int]
    retweet_count: int
    lang: Optional[str]
    filter_level: FilterLevelName
    timestamp_ms: str


class TwitterDirectMessage(TypedDict, total=False):
    id: int
    id_str: str
    created_at: datetime
    text: str
    sender: TwitterUser
    sender_id: int
    recipient: TwitterUser
    recipient_id: int
    entities: TwitterEntities
