"""
Tests for the Stripe adapter
"""
import json
from unittest.mock import MagicMock, patch

import pytest
import stripe

from valet.services.stripe_client import StripePaymentProvider, parse_event, verify_webhook
from valet.utils.errors import ProviderFailureError, UnauthorizedError


class TestStripePaymentProvider:

    @patch("valet.services.stripe_client.stripe.PaymentIntent.create")
    def test_create_payment_intent(self, mock_create):
        mock_create.return_value = MagicMock(
            id="pi_1", client_secret="pi_1_secret_x", amount=1500, currency="usd"
        )
        provider = StripePaymentProvider("sk_test_123", "USD")

        handle = provider.create_payment_intent(1500, {"ticketId": "T1"}, idempotency_key="key-1")

        assert handle.client_secret == "pi_1_secret_x"
        kwargs = mock_create.call_args[1]
        assert kwargs["amount"] == 1500
        assert kwargs["currency"] == "usd"
        assert kwargs["metadata"] == {"ticketId": "T1"}
        assert kwargs["api_key"] == "sk_test_123"
        assert kwargs["idempotency_key"] == "key-1"

    @patch("valet.services.stripe_client.stripe.PaymentIntent.create")
    def test_stripe_error_is_provider_failure(self, mock_create):
        mock_create.side_effect = stripe.StripeError("card network down")

        with pytest.raises(ProviderFailureError):
            StripePaymentProvider("sk_test_123").create_payment_intent(100, {})

    def test_not_configured(self):
        with pytest.raises(ProviderFailureError):
            StripePaymentProvider("").create_payment_intent(100, {})


class TestWebhookVerification:

    @patch("valet.services.stripe_client.stripe.Webhook.construct_event")
    def test_valid_signature(self, mock_construct):
        payload = json.dumps({"id": "evt_1", "type": "payment_intent.succeeded"}).encode()

        event = verify_webhook(payload, "t=1,v1=abc", "whsec_test")

        assert event["id"] == "evt_1"
        mock_construct.assert_called_once_with(payload=payload, sig_header="t=1,v1=abc", secret="whsec_test")

    @patch("valet.services.stripe_client.stripe.Webhook.construct_event")
    def test_invalid_signature(self, mock_construct):
        mock_construct.side_effect = stripe.SignatureVerificationError("bad", "t=1,v1=abc")

        with pytest.raises(UnauthorizedError):
            verify_webhook(b"{}", "t=1,v1=abc", "whsec_test")

    def test_missing_header(self):
        with pytest.raises(UnauthorizedError):
            verify_webhook(b"{}", None, "whsec_test")

    def test_parse_event_rejects_non_objects(self):
        with pytest.raises(UnauthorizedError):
            parse_event(b"[1, 2]")
