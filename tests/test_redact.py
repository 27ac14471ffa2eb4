"""Tests for cronhost.redact -- keeping the API key out of logs and reprs."""

import logging

from conftest import API_KEY, reply
from cronhost import CronhostConfig
from cronhost.redact import mask_api_key, redact_headers, redact_sensitive_text


class TestMaskApiKey:
    def test_long_key_keeps_prefix_and_suffix(self):
        assert mask_api_key("ch_live_abcdefghijklmnop1234") == "ch_liv...1234"

    def test_short_key_fully_masked(self):
        assert mask_api_key("short") == "***"

    def test_empty(self):
        assert mask_api_key("") == ""
        assert mask_api_key(None) == ""


class TestRedactHeaders:
    def test_api_key_header_masked_case_insensitively(self):
        result = redact_headers({"X-Api-Key": API_KEY, "Content-Type": "application/json"})
        assert API_KEY not in result.values()
        assert result["Content-Type"] == "application/json"

    def test_input_not_mutated(self):
        headers = {"x-api-key": API_KEY}
        redact_headers(headers)
        assert headers["x-api-key"] == API_KEY


class TestRedactText:
    def test_json_api_key_field(self):
        text = '{"apiKey": "ch_live_abcdefghijklmnop1234", "name": "x"}'
        result = redact_sensitive_text(text)
        assert "abcdefghijklmnop" not in result
        assert '"name": "x"' in result

    def test_plain_text_unchanged(self):
        assert redact_sensitive_text("nothing secret here") == "nothing secret here"


def test_config_repr_masks_key():
    config = CronhostConfig(api_key=API_KEY)
    assert API_KEY not in repr(config)
    assert "cronho.st" in repr(config)


def test_debug_log_never_contains_key(make_client, caplog):
    client, _ = make_client(reply([]))
    with caplog.at_level(logging.DEBUG, logger="cronhost"):
        client.get_schedules()

    assert "GET https://cron.test/api/v1/schedules" in caplog.text
    assert API_KEY not in caplog.text
