"""Unit tests for request and result schemas."""

from __future__ import annotations

import pytest

from comms_sdk.core.exceptions import ProviderError
from comms_sdk.core.schemas import (
    ChannelSendResult,
    ChannelStatus,
    EmailRequest,
    NotificationStatus,
    ProviderSendResult,
    SmsRequest,
    WebpushRequest,
    get_channel_ids,
    is_error_response,
    is_success_response,
)


@pytest.mark.unit
class TestChannelRequests:
    """Test suite for channel request models."""

    def test_email_accepts_camel_case_and_from_alias(self):
        email = EmailRequest.model_validate(
            {
                "from": "me@acme.io",
                "to": "you@acme.io",
                "subject": "Hi",
                "replyTo": "support@acme.io",
                "userId": "u-1",
            }
        )

        assert email.from_ == "me@acme.io"
        assert email.reply_to == "support@acme.io"
        assert email.user_id == "u-1"

    def test_unknown_fields_are_kept(self):
        sms = SmsRequest.model_validate({"from": "Acme", "to": "+1555", "text": "hi", "campaign": "c1"})

        assert sms.model_extra == {"campaign": "c1"}

    def test_webpush_requires_subscription_keys(self):
        with pytest.raises(ValueError):
            WebpushRequest.model_validate(
                {"subscription": {"endpoint": "https://push.example.com"}, "title": "t", "body": "b"}
            )


@pytest.mark.unit
class TestResults:
    """Test suite for per-channel and aggregate results."""

    def test_success_result_copies_provider_outcome(self):
        result = ChannelSendResult.success_result("sms", ProviderSendResult(id="m-1", provider_id="p"))

        assert result.success
        assert result.id == "m-1"
        assert result.provider_id == "p"
        assert result.error is None

    def test_failure_result_has_no_id(self):
        error = ProviderError("down")
        result = ChannelSendResult.failure_result("email", error, provider_id="p")

        assert not result.success
        assert result.id is None
        assert result.error is error

    def test_results_are_immutable(self):
        result = ChannelSendResult.success_result("sms", ProviderSendResult(id="m", provider_id="p"))

        with pytest.raises(AttributeError):
            result.id = "other"  # type: ignore[misc]

    def test_status_to_dict_uses_wire_names(self):
        status = NotificationStatus(
            status="error",
            channels={
                "sms": ChannelStatus(id="m-1", provider_id="sms-p"),
                "email": ChannelStatus(id=None, provider_id="email-p"),
            },
            errors={"email": "down"},
        )

        assert status.to_dict() == {
            "status": "error",
            "channels": {
                "sms": {"id": "m-1", "providerId": "sms-p"},
                "email": {"id": None, "providerId": "email-p"},
            },
            "errors": {"email": "down"},
        }

    def test_success_status_omits_errors(self):
        status = NotificationStatus(channels={"sms": ChannelStatus(id="m", provider_id="p")})

        assert "errors" not in status.to_dict()
        assert is_success_response(status)
        assert not is_error_response(status)

    def test_get_channel_ids_skips_failed_channels(self):
        status = NotificationStatus(
            status="error",
            channels={
                "sms": ChannelStatus(id="m-1", provider_id="p"),
                "email": ChannelStatus(id=None, provider_id="q"),
            },
            errors={"email": "down"},
        )

        assert get_channel_ids(status) == {"sms": "m-1"}
