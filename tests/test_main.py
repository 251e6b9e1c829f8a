"""
Unit tests for the command line entry point
"""
import io
from unittest.mock import MagicMock, patch

import pytest

from logbin import main as cli
from logbin.config import ClientConfig


@pytest.fixture(autouse=True)
def config(tmp_path):
    config = ClientConfig(server="http://logbin.test", log_dir=tmp_path / "logs")
    with patch.object(cli, "load_config", return_value=config):
        yield config


def test_watch_builds_session(config):
    with patch.object(cli, "run_watch", return_value=0) as run_watch:
        assert cli.main(["watch", "quiet-harbor-4821", "--filter", "error", "--msg", "message,msg"]) == 0

    session, passed_config = run_watch.call_args.args
    assert passed_config is config
    assert session.channel_url == "http://logbin.test/quiet-harbor-4821"
    assert session.filter_text == "error"
    assert session.subscription.msg_keys == ("message", "msg")


def test_watch_flags_override_url_params():
    with patch.object(cli, "run_watch", return_value=0) as run_watch:
        cli.main(["watch", "https://other.example/quiet-harbor-4821?time=ts&filter=a", "--time", "when"])

    session = run_watch.call_args.args[0]
    assert session.server == "https://other.example"
    assert session.subscription.time_keys == ("when",)
    assert session.filter_text == "a"


def test_watch_without_target_opens_landing():
    with patch.object(cli, "run_watch", return_value=0) as run_watch:
        cli.main(["watch"])
    assert run_watch.call_args.args[0].channel is None


def test_send_messages():
    client = MagicMock()
    client.send_lines.return_value = (2, 0)
    with patch("logbin.ingest.IngestClient", return_value=client) as factory:
        assert cli.main(["send", "quiet-harbor-4821", "-m", "one", "-m", "two"]) == 0

    factory.assert_called_once_with("http://logbin.test/quiet-harbor-4821")
    client.send_lines.assert_called_once_with(["one", "two"])


def test_send_reads_stdin(monkeypatch):
    client = MagicMock()
    client.send_lines.return_value = (1, 0)
    stdin = io.StringIO("from stdin\n")
    monkeypatch.setattr("sys.stdin", stdin)
    with patch("logbin.ingest.IngestClient", return_value=client):
        cli.main(["send", "quiet-harbor-4821"])

    client.send_lines.assert_called_once_with(stdin)


def test_send_failures_exit_nonzero():
    client = MagicMock()
    client.send_lines.return_value = (1, 1)
    with patch("logbin.ingest.IngestClient", return_value=client):
        assert cli.main(["send", "quiet-harbor-4821", "-m", "x", "-m", "y"]) == 1


def test_send_without_channel():
    assert cli.main(["send", "http://logbin.test/"]) == 2


def test_new_prints_channel_url(capsys):
    assert cli.main(["new"]) == 0
    output = capsys.readouterr().out.strip()
    assert output.startswith("http://logbin.test/")
    assert len(output.rsplit("/", 1)[1]) >= 10


def test_keyboard_interrupt_is_quiet():
    with patch.object(cli, "run_watch", side_effect=KeyboardInterrupt):
        assert cli.main(["watch", "quiet-harbor-4821"]) == 130


def test_unexpected_error():
    with patch.object(cli, "run_watch", side_effect=RuntimeError("boom")):
        assert cli.main(["watch", "quiet-harbor-4821"]) == 1


def test_missing_command_is_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 2
