"""Shared fixtures: a token and fake aiohttp sessions/responses."""

import os
from typing import Iterable, List, Union
from unittest.mock import AsyncMock, Mock, patch

import pytest

from twitter_stream import Token

Chunk = Union[bytes, BaseException]


class FakeContent:
    """Stands in for `aiohttp.StreamReader`; exceptions in `chunks` are raised in order."""

    def __init__(self, chunks: Iterable[Chunk]) -> None:
        self.chunks: List[Chunk] = list(chunks)

    async def iter_any(self):
        for chunk in self.chunks:
            if isinstance(chunk, BaseException):
                raise chunk
            yield chunk


def make_response(chunks: Iterable[Chunk] = (), status: int = 200, reason: str = "OK") -> Mock:
    resp = Mock()
    resp.status = status
    resp.reason = reason
    resp.content = FakeContent(chunks)
    resp.close = Mock()
    resp.release = Mock()
    return resp


def make_session(resp: Mock) -> Mock:
    session = Mock()
    session.request = AsyncMock(return_value=resp)
    session.close = AsyncMock()
    return session


@pytest.fixture
def token() -> Token:
    return Token("ck", "cs", "ak", "as")


@pytest.fixture
def environ():
    with patch.dict(os.environ, {}, clear=True):
        yield os.environ
