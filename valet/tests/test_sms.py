"""
Tests for SMS delivery
"""
from unittest.mock import MagicMock, patch

import pytest

from valet.services.sms import SmsService
from valet.utils.errors import InvalidInputError, ProviderFailureError


class TestSmsService:

    @pytest.mark.parametrize("mode", ["mock", "test"])
    def test_non_live_modes_do_not_call_twilio(self, mode):
        with patch("twilio.rest.Client") as mock_client:
            result = SmsService(mode=mode).send("+14155550100", "Your car is ready!")

        assert result.success is True
        assert result.mode == mode
        assert result.sid is None
        mock_client.assert_not_called()

    @patch("twilio.rest.Client")
    def test_live_mode_sends(self, mock_client):
        mock_client.return_value.messages.create.return_value = MagicMock(sid="SM123")
        service = SmsService("live", "AC123", "token", "+14155550199")

        result = service.send("+14155550100", "Your car is ready!")

        assert result.sid == "SM123"
        mock_client.assert_called_once_with("AC123", "token")
        mock_client.return_value.messages.create.assert_called_once_with(
            body="Your car is ready!", from_="+14155550199", to="+14155550100"
        )

    @patch("twilio.rest.Client")
    def test_live_mode_failure(self, mock_client):
        from twilio.base.exceptions import TwilioException

        mock_client.return_value.messages.create.side_effect = TwilioException("rejected")

        with pytest.raises(ProviderFailureError):
            SmsService("live", "AC123", "token", "+14155550199").send("+14155550100", "hi")

    @pytest.mark.parametrize("to,body", [("", "hi"), ("+14155550100", ""), ("555-0100", "hi")])
    def test_invalid_input(self, to, body):
        with pytest.raises(InvalidInputError):
            SmsService().send(to, body)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            SmsService(mode="carrier-pigeon")
