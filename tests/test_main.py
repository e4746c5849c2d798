"""
Tests for the command-line interface.
"""

import json
from unittest.mock import patch

import pytest

from hn_thread.__main__ import fetch_story
from hn_thread.config import load_config

from conftest import http_error, item_url


@pytest.fixture
def patched_provider(mock_context, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with patch(
        "hn_thread.__main__.HNContextProvider.get_context_from_config",
        return_value=mock_context,
    ):
        yield


def test_fetch_story_prints_json(patched_provider, loaded_client, capsys):
    fetch_story("12345", depth=0, limit=2, log_level="WARNING")

    payload = json.loads(capsys.readouterr().out)
    assert payload["story"]["id"] == 12345
    assert [c["id"] for c in payload["comments"]] == [1001, 1002]
    assert all(c["replies"] == [] for c in payload["comments"])


def test_fetch_story_error_exits(patched_provider, loaded_client, capsys):
    loaded_client.responses[item_url(12345)] = http_error(500)
    with pytest.raises(SystemExit) as exc_info:
        fetch_story("12345", log_level="WARNING")

    assert exc_info.value.code == 1
    assert json.loads(capsys.readouterr().out)["error"] == "upstream_status"


def test_fetch_story_invalid_id(patched_provider, mock_api_client, capsys):
    with pytest.raises(SystemExit):
        fetch_story("not-a-number", log_level="WARNING")

    assert json.loads(capsys.readouterr().out)["error"] == "invalid_input"
    assert mock_api_client.get_calls == []


def test_fetch_story_loads_config_once(patched_provider, loaded_client, capsys):
    with patch("hn_thread.__main__.load_config", wraps=load_config) as mock_load:
        fetch_story("12345", depth=0, log_level="WARNING")

    mock_load.assert_called_once_with("")
    assert json.loads(capsys.readouterr().out)["story"]["id"] == 12345


def test_fetch_story_rejects_negative_config(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "hn_thread.toml").write_text("[aggregate]\nlimit = -1\n")
    with pytest.raises(SystemExit) as exc_info:
        fetch_story("12345", log_level="WARNING")

    assert exc_info.value.code == 1
    assert json.loads(capsys.readouterr().out)["error"] == "invalid_input"
