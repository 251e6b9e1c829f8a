"""
Unit tests for the session context
"""
from urllib.parse import parse_qs, urlsplit

import pytest

from logbin.session import (
    MIN_CHANNEL_LENGTH,
    SessionContext,
    SubscriptionConfig,
    generate_channel_name,
    parse_key_list,
)


class TestParseKeyList:

    @pytest.mark.parametrize("text,expected", [
        ("msg", ("msg",)),
        ("msg,message", ("msg", "message")),
        ("ts|time", ("ts", "time")),
        (" a , b |c ", ("a", "b", "c")),
        ("a,,b", ("a", "b")),
        ("", ()),
        (None, ()),
    ])
    def test_parse(self, text, expected):
        assert parse_key_list(text) == expected


class TestFromUrl:

    def test_full_url(self):
        session = SessionContext.from_url(
            "https://logbin.example/quiet-harbor-4821?filter=error&msg=message&meta=level|host&time=ts"
        )
        assert session.server == "https://logbin.example"
        assert session.channel == "quiet-harbor-4821"
        assert session.filter_text == "error"
        assert session.subscription == SubscriptionConfig(
            msg_keys=("message",), meta_keys=("level", "host"), time_keys=("ts",)
        )

    def test_no_channel(self):
        session = SessionContext.from_url("https://logbin.example/")
        assert session.channel is None
        assert session.channel_url is None

    def test_only_first_segment_is_channel(self):
        session = SessionContext.from_url("https://logbin.example/quiet-harbor-4821/extra")
        assert session.channel == "quiet-harbor-4821"

    def test_encoded_channel(self):
        session = SessionContext.from_url("https://logbin.example/my%20channel%20name")
        assert session.channel == "my channel name"
        assert session.channel_url == "https://logbin.example/my%20channel%20name"

    def test_relative_url_rejected(self):
        with pytest.raises(ValueError):
            SessionContext.from_url("quiet-harbor-4821")


class TestFromTarget:

    def test_bare_name(self):
        session = SessionContext.from_target("quiet-harbor-4821", "http://localhost:8080/")
        assert session.server == "http://localhost:8080"
        assert session.channel_url == "http://localhost:8080/quiet-harbor-4821"

    def test_url(self):
        session = SessionContext.from_target("https://other.example/quiet-harbor-4821", "http://localhost:8080")
        assert session.server == "https://other.example"

    def test_none(self):
        session = SessionContext.from_target(None, "http://localhost:8080")
        assert session.channel is None


class TestShareUrl:

    def test_without_filter(self):
        session = SessionContext(server="http://h", channel="quiet-harbor-4821")
        assert session.share_url == "http://h/quiet-harbor-4821"

    def test_filter_mirrored(self):
        session = SessionContext(server="http://h", channel="quiet-harbor-4821").with_filter("disk full")
        query = parse_qs(urlsplit(session.share_url).query)
        assert query == {"filter": ["disk full"]}

    def test_clearing_filter_removes_param(self):
        session = SessionContext(server="http://h", channel="quiet-harbor-4821", filter_text="x")
        assert "filter" not in session.with_filter("").share_url

    def test_subscription_params_kept(self):
        session = SessionContext(
            server="http://h",
            channel="quiet-harbor-4821",
            subscription=SubscriptionConfig(msg_keys=("msg",), time_keys=("ts", "time")),
        ).with_filter("err")
        query = parse_qs(urlsplit(session.share_url).query)
        assert query == {"msg": ["msg"], "time": ["ts,time"], "filter": ["err"]}

    def test_round_trip_through_from_url(self):
        original = SessionContext(
            server="http://h",
            channel="quiet-harbor-4821",
            filter_text="a b",
            subscription=SubscriptionConfig(meta_keys=("level",)),
        )
        assert SessionContext.from_url(original.share_url) == original


class TestDerivation:

    def test_with_filter_is_immutable(self):
        session = SessionContext(server="http://h", channel="quiet-harbor-4821")
        updated = session.with_filter("error")
        assert session.filter_text == ""
        assert updated.filter_text == "error"
        assert updated.channel == session.channel

    def test_with_channel(self):
        session = SessionContext(server="http://h").with_channel("quiet-harbor-4821")
        assert session.channel_url == "http://h/quiet-harbor-4821"

    def test_stream_params_exclude_filter(self):
        session = SessionContext(
            server="http://h",
            channel="quiet-harbor-4821",
            filter_text="err",
            subscription=SubscriptionConfig(msg_keys=("msg",)),
        )
        assert session.stream_params == {"msg": "msg"}


def test_generated_channel_names():
    names = {generate_channel_name() for _ in range(50)}
    assert len(names) > 1
    for name in names:
        assert len(name) >= MIN_CHANNEL_LENGTH
        adjective, noun, number = name.split("-")
        assert adjective.isalpha() and noun.isalpha()
        assert 1000 <= int(number) <= 9999
