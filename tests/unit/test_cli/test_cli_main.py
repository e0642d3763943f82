"""Tests for the comms CLI."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner
import pytest

from comms_sdk.cli.main import cli
from comms_sdk.providers.email.smtp import SmtpProvider


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_json(tmp_path):
    def write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)

    return write


def printed_status(output: str) -> dict:
    return json.loads(output[output.index("{") : output.rindex("}") + 1])


@pytest.mark.unit
class TestProvidersCommand:
    """Tests for ``comms providers``."""

    def test_lists_standard_channels(self, runner):
        result = runner.invoke(cli, ["providers"])

        assert result.exit_code == 0
        email_line = next(line for line in result.output.splitlines() if line.startswith("email:"))
        for provider_type in ("smtp", "sendgrid", "mailgun", "logger", "custom", "notificationcatcher"):
            assert provider_type in email_line
        assert "telegram: " in result.output

    def test_custom_channel(self, runner):
        result = runner.invoke(cli, ["providers", "--channel", "pager"])

        assert result.exit_code == 0
        assert "not a standard channel" in result.output
        pager_line = next(line for line in result.output.splitlines() if line.startswith("pager:"))
        assert "logger" in pager_line
        assert "custom" in pager_line


@pytest.mark.unit
class TestValidateCommand:
    """Tests for ``comms validate``."""

    def test_valid_config(self, runner, write_json):
        config = write_json(
            "config.json",
            {
                "channels": {
                    "email": {"providers": [{"type": "logger"}]},
                    "sms": {"providers": [{"type": "logger"}, {"type": "logger", "id": "backup"}], "multiProviderStrategy": "roundrobin"},
                }
            },
        )

        result = runner.invoke(cli, ["validate", "--config", config])

        assert result.exit_code == 0
        assert "email: logger [fallback]" in result.output
        assert "sms: logger, logger [roundrobin]" in result.output
        assert "push: logger (default) [fallback]" in result.output
        assert "Configuration is valid" in result.output

    def test_invalid_strategy(self, runner, write_json):
        config = write_json("config.json", {"channels": {"sms": {"multiProviderStrategy": "random"}}})

        result = runner.invoke(cli, ["validate", "--config", config])

        assert result.exit_code == 2
        assert "Invalid configuration" in result.output

    def test_malformed_json(self, runner, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        result = runner.invoke(cli, ["validate", "--config", str(path)])

        assert result.exit_code == 2
        assert "not valid JSON" in result.output


@pytest.mark.unit
class TestSendCommand:
    """Tests for ``comms send``."""

    def test_send_from_stdin(self, runner, write_json):
        config = write_json("config.json", {"channels": {"email": {"providers": [{"type": "logger"}]}}})
        request = {"id": "n-1", "email": {"from": "a@example.com", "to": "b@example.com", "subject": "Hi"}}

        result = runner.invoke(cli, ["send", "--config", config, "--request", "-"], input=json.dumps(request))

        assert result.exit_code == 0
        status = printed_status(result.output)
        assert status["status"] == "success"
        assert status["channels"]["email"]["providerId"] == "email-logger-provider"

    def test_failed_channel_exits_with_one(self, runner, write_json):
        request = write_json("request.json", {"email": None})

        result = runner.invoke(cli, ["send", "--request", request])

        assert result.exit_code == 1
        status = printed_status(result.output)
        assert status["errors"] == {"email": "No request data for channel: email"}
        assert "Failed channels: email" in result.output

    def test_request_must_be_object(self, runner, write_json):
        request = write_json("request.json", ["email"])

        result = runner.invoke(cli, ["send", "--request", request])

        assert result.exit_code == 2
        assert "Request must be a JSON object" in result.output

    def test_catcher_flag(self, runner, write_json):
        request = write_json(
            "request.json",
            {"sms": {"from": "Acme", "to": "+15551234567", "text": "Your code is 1234"}},
        )

        with patch.object(SmtpProvider, "deliver", AsyncMock(return_value="<abc@catcher>")) as deliver:
            result = runner.invoke(cli, ["send", "--request", request, "--catcher"])

        assert result.exit_code == 0
        status = printed_status(result.output)
        assert status["channels"]["sms"] == {
            "id": "<abc@catcher>",
            "providerId": "sms-notificationcatcher-provider",
        }
        deliver.assert_awaited_once()
