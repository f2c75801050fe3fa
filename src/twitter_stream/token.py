from typing import NamedTuple, Optional

from oauthlib.oauth1 import SIGNATURE_HMAC_SHA1, SIGNATURE_TYPE_AUTH_HEADER, Client

from . import config


class Token(NamedTuple):
    """OAuth 1.0a credentials used to sign Streaming API requests."""

    consumer_key: str
    consumer_secret: str
    access_key: str
    access_secret: str

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Token":
        config.load_env(dotenv_path)
        return cls(*config.read_credentials())

    def oauth_client(self, **kwargs) -> Client:
        return Client(
            self.consumer_key,
            client_secret=self.consumer_secret,
            resource_owner_key=self.access_key,
            resource_owner_secret=self.access_secret,
            signature_method=SIGNATURE_HMAC_SHA1,
            signature_type=SIGNATURE_TYPE_AUTH_HEADER,
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"Token(consumer_key={self.consumer_key!r}, access_key={self.access_key!r})"
