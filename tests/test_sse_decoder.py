"""
Unit tests for Server-Sent Events decoding
"""
from logbin.stream.sse import SSEDecoder, SSEFrame


def decode(lines):
    return list(SSEDecoder().iter_frames(lines))


def test_named_event():
    frames = decode(["event: log", 'data: {"raw": "hello"}', ""])
    assert frames == [SSEFrame(event="log", data='{"raw": "hello"}')]


def test_unnamed_event_is_message():
    frames = decode(["data: hello", ""])
    assert frames[0].event == "message"


def test_multiline_data_joined():
    frames = decode(["data: first", "data: second", ""])
    assert frames[0].data == "first\nsecond"


def test_comments_are_ignored():
    frames = decode([": keep-alive", "", "data: x", ""])
    assert len(frames) == 1
    assert frames[0].data == "x"


def test_blank_line_without_data_dispatches_nothing():
    assert decode(["event: stats", "", ""]) == []


def test_event_name_resets_between_frames():
    frames = decode(["event: stats", "data: {}", "", "data: plain", ""])
    assert [f.event for f in frames] == ["stats", "message"]


def test_only_one_leading_space_stripped():
    frames = decode(["data:  indented", ""])
    assert frames[0].data == " indented"


def test_no_space_after_colon():
    frames = decode(["data:tight", ""])
    assert frames[0].data == "tight"


def test_retry_and_id():
    decoder = SSEDecoder()
    frames = list(decoder.iter_frames(["retry: 5000", "id: 42", "data: x", ""]))
    assert decoder.retry == 5000
    assert decoder.last_event_id == "42"
    assert frames[0].id == "42"
    assert frames[0].retry == 5000


def test_invalid_retry_ignored():
    decoder = SSEDecoder()
    decoder.feed("retry: soon")
    assert decoder.retry is None


def test_bytes_and_carriage_returns():
    frames = decode([b"event: log\r", b"data: caf\xc3\xa9\r", b""])
    assert frames == [SSEFrame(event="log", data="café")]


def test_incomplete_frame_not_dispatched():
    assert decode(["event: log", "data: pending"]) == []


def test_feed_returns_frame_on_blank_line():
    decoder = SSEDecoder()
    assert decoder.feed("data: x") is None
    assert decoder.feed("") == SSEFrame(event="message", data="x")
