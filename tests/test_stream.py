"""Tests for opening a stream and consuming its messages."""

import asyncio

import aiohttp
import pytest

from conftest import make_response, make_session
from twitter_stream import (
    AuthError,
    DecodeError,
    FormattingError,
    HTTPError,
    RatelimitError,
    ServiceError,
    StallTimeoutError,
)
from twitter_stream.builder import SAMPLE, PreparedRequest
from twitter_stream.message import Delete, Limit
from twitter_stream.stream import TwitterStream, is_blank, open_stream

REQUEST = PreparedRequest("GET", SAMPLE, {"Authorization": "OAuth ..."}, b"")


@pytest.mark.parametrize(
    "line, blank",
    [(b"", True), (b" \t\r\n", True), (b"{}", False), (b" 1 ", False)],
)
def test_is_blank(line, blank):
    assert is_blank(line) is blank


@pytest.mark.asyncio
async def test_yields_json_strings_and_skips_keep_alives():
    resp = make_response([b'{"a":1}\r\n', b"\r\n", b"  \r\n", b'{"b":', b"2}\r\n"])
    stream = await open_stream(make_session(resp), REQUEST, 90)

    assert [json_str async for json_str in stream] == ['{"a":1}', '{"b":2}']
    assert stream.closed
    resp.close.assert_called_once()


@pytest.mark.asyncio
async def test_request_uses_read_timeout():
    resp = make_response()
    session = make_session(resp)
    await open_stream(session, REQUEST, 30)

    args, kwargs = session.request.call_args
    assert args == ("GET", SAMPLE)
    assert kwargs["headers"] == REQUEST.headers
    assert kwargs["data"] is None
    assert kwargs["timeout"].total is None
    assert kwargs["timeout"].sock_read == 30


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, error",
    [
        (401, AuthError),
        (403, AuthError),
        (420, RatelimitError),
        (429, RatelimitError),
        (400, FormattingError),
        (406, FormattingError),
        (413, FormattingError),
        (416, FormattingError),
        (503, HTTPError),
    ],
)
async def test_status_errors(status, error):
    resp = make_response(status=status, reason="Nope")
    with pytest.raises(error) as excinfo:
        await open_stream(make_session(resp), REQUEST, 90)

    assert excinfo.value.status == status
    assert excinfo.value.reason == "Nope"
    assert str(status) in str(excinfo.value)
    resp.release.assert_called_once()


@pytest.mark.asyncio
async def test_unavailable_is_a_plain_http_error():
    with pytest.raises(HTTPError) as excinfo:
        await open_stream(make_session(make_response(status=503)), REQUEST, 90)
    assert type(excinfo.value) is HTTPError


@pytest.mark.asyncio
async def test_connection_error_is_wrapped():
    session = make_session(make_response())
    session.request.side_effect = aiohttp.ClientConnectionError("refused")

    with pytest.raises(ServiceError, match="refused"):
        await open_stream(session, REQUEST, 90)


@pytest.mark.asyncio
async def test_read_stall_raises_timeout():
    resp = make_response([b'{"a":1}\r\n', asyncio.TimeoutError()])
    stream = await open_stream(make_session(resp), REQUEST, 90)

    assert await stream.__anext__() == '{"a":1}'
    with pytest.raises(StallTimeoutError):
        await stream.__anext__()
    assert stream.closed
    resp.close.assert_called_once()


@pytest.mark.asyncio
async def test_payload_error_while_reading():
    resp = make_response([aiohttp.ClientPayloadError("truncated")])
    stream = await open_stream(make_session(resp), REQUEST, 90)

    with pytest.raises(ServiceError, match="truncated"):
        await stream.__anext__()
    assert stream.closed


@pytest.mark.asyncio
async def test_invalid_utf8():
    resp = make_response([b"\xff\xfe\r\n", b'"ok"\r\n'])
    stream = await open_stream(make_session(resp), REQUEST, 90)

    with pytest.raises(DecodeError) as excinfo:
        await stream.__anext__()
    assert excinfo.value.line == b"\xff\xfe"
    # The stream stays usable after a bad line.
    assert await stream.__anext__() == '"ok"'


@pytest.mark.asyncio
async def test_utf8_split_across_chunks():
    data = '{"text":"ふー"}\r\n'.encode("utf-8")
    resp = make_response([data[:10], data[10:]])
    stream = await open_stream(make_session(resp), REQUEST, 90)

    assert [json_str async for json_str in stream] == ['{"text":"ふー"}']


@pytest.mark.asyncio
async def test_aclose_stops_iteration_and_closes_owned_session():
    resp = make_response([b"1\r\n", b"2\r\n"])
    session = make_session(resp)
    stream = await open_stream(session, REQUEST, 90, owns_session=True)

    assert await stream.__anext__() == "1"
    await stream.aclose()
    await stream.aclose()

    assert [json_str async for json_str in stream] == []
    resp.close.assert_called_once()
    session.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_borrowed_session_is_left_open():
    resp = make_response([b"1\r\n"])
    session = make_session(resp)

    async with await open_stream(session, REQUEST, 90) as stream:
        assert isinstance(stream, TwitterStream)

    assert stream.closed
    session.close.assert_not_awaited()


@pytest.mark.asyncio
async def test_messages_are_parsed():
    resp = make_response(
        [
            b'{"delete":{"status":{"id":1234,"id_str":"1234","user_id":3,"user_id_str":"3"}}}\r\n',
            b"\r\n",
            b'{"limit":{"track":42}}\r\n',
        ]
    )
    stream = await open_stream(make_session(resp), REQUEST, 90)

    assert [message async for message in stream.messages()] == [
        Delete(id=1234, user_id=3),
        Limit(track=42),
    ]
