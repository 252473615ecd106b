"""Tests for the payment endpoints and the Stripe gateway client."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from app import config
from app.crud import payment_crud
from app.main import app
from app.utils.exceptions import PaymentGatewayError
from app.utils.payment_gateway import StripeGateway, get_payment_gateway


class FakeGateway:
    """Stands in for StripeGateway; records calls and returns canned intents."""

    def __init__(self, intent=None, error=None):
        self.intent = intent or {"id": "pi_test", "status": "succeeded", "amount": 500000}
        self.error = error
        self.created = []

    def create_payment_intent(self, amount, currency, metadata=None):
        if self.error:
            raise self.error
        self.created.append({"amount": amount, "currency": currency, "metadata": metadata})
        return {"id": "pi_new", "client_secret": "pi_new_secret"}

    def retrieve_payment_intent(self, intent_id):
        if self.error:
            raise self.error
        return dict(self.intent, id=intent_id)


@pytest.fixture
def gateway():
    fake = FakeGateway()
    app.dependency_overrides[get_payment_gateway] = lambda: fake
    return fake


def _task_status(client, application_id, headers):
    application = client.get(f"/api/applications/{application_id}", headers=headers).json()
    return client.get(f"/api/tasks/{application['task_id']}").json()["status"]


class TestStripeGateway:
    def _response(self, status_code, body):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = body
        return response

    def test_create_intent_sends_minor_units(self):
        gateway = StripeGateway("sk_test", api_base="https://stripe.test/v1")

        with patch("app.utils.payment_gateway.requests.request") as mock_request:
            mock_request.return_value = self._response(200, {"id": "pi_1", "client_secret": "s"})
            intent = gateway.create_payment_intent(49.99, "inr", {"application_id": 7})

        assert intent["id"] == "pi_1"
        method, url = mock_request.call_args.args
        kwargs = mock_request.call_args.kwargs
        assert method == "POST"
        assert url == "https://stripe.test/v1/payment_intents"
        assert kwargs["data"] == {"amount": 4999, "currency": "inr", "metadata[application_id]": "7"}
        assert kwargs["auth"] == ("sk_test", "")

    def test_error_response_raises(self):
        gateway = StripeGateway("sk_test")

        with patch("app.utils.payment_gateway.requests.request") as mock_request:
            mock_request.return_value = self._response(402, {"error": {"message": "Card declined"}})
            with pytest.raises(PaymentGatewayError, match="Card declined"):
                gateway.retrieve_payment_intent("pi_1")

    def test_network_failure_raises(self):
        gateway = StripeGateway("sk_test")

        with patch("app.utils.payment_gateway.requests.request", side_effect=requests.exceptions.ConnectionError("down")):
            with pytest.raises(PaymentGatewayError):
                gateway.retrieve_payment_intent("pi_1")

    def test_no_key_means_no_gateway(self, monkeypatch):
        monkeypatch.setattr(config, "STRIPE_SECRET_KEY", None)
        assert get_payment_gateway() is None


class TestCreatePaymentIntent:
    def test_owner_gets_client_secret(self, client, gateway, employer, task, accepted_application, headers_for):
        response = client.post(
            "/api/create-payment-intent",
            json={"application_id": accepted_application.id, "amount": 5000},
            headers=headers_for(employer),
        )

        assert response.status_code == 200
        assert response.json() == {"client_secret": "pi_new_secret", "payment_intent_id": "pi_new"}
        assert gateway.created[0]["amount"] == 5000
        assert gateway.created[0]["metadata"] == {"application_id": accepted_application.id, "task_id": task.id}

    def test_missing_fields(self, client, gateway, employer, headers_for):
        response = client.post("/api/create-payment-intent", json={}, headers=headers_for(employer))
        assert response.status_code == 400

    def test_student_forbidden(self, client, gateway, student, accepted_application, headers_for):
        response = client.post(
            "/api/create-payment-intent",
            json={"application_id": accepted_application.id, "amount": 5000},
            headers=headers_for(student),
        )
        assert response.status_code == 403

    def test_not_configured(self, client, employer, accepted_application, headers_for):
        app.dependency_overrides[get_payment_gateway] = lambda: None

        response = client.post(
            "/api/create-payment-intent",
            json={"application_id": accepted_application.id, "amount": 5000},
            headers=headers_for(employer),
        )
        assert response.status_code == 500
        assert response.json() == {"message": "Payment gateway is not configured"}


class TestPaymentConfirm:
    def test_verified_intent(self, client, gateway, employer, accepted_application, headers_for):
        response = client.post(
            "/api/payment-confirm",
            json={"application_id": accepted_application.id, "payment_intent_id": "pi_abc"},
            headers=headers_for(employer),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["payment"]["amount"] == 5000
        assert body["payment"]["status"] == "completed"
        assert _task_status(client, accepted_application.id, headers_for(employer)) == "completed"

    def test_unfinished_intent(self, client, gateway, employer, accepted_application, headers_for):
        gateway.intent = {"status": "requires_payment_method", "amount": 500000}

        response = client.post(
            "/api/payment-confirm",
            json={"application_id": accepted_application.id, "payment_intent_id": "pi_abc"},
            headers=headers_for(employer),
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Payment has not been completed"}
        assert _task_status(client, accepted_application.id, headers_for(employer)) == "in-progress"

    def test_gateway_error_tolerated_when_simulated(self, client, gateway, employer, accepted_application, headers_for):
        gateway.error = PaymentGatewayError("Payment gateway timed out")

        response = client.post(
            "/api/payment-confirm",
            json={
                "application_id": accepted_application.id,
                "payment_intent_id": "pi_abc",
                "amount": 4500,
                "simulated_payment": True,
            },
            headers=headers_for(employer),
        )

        assert response.status_code == 200
        assert response.json()["payment"]["amount"] == 4500

    def test_gateway_error_propagates_without_simulated_flag(
        self, client, gateway, db, employer, accepted_application, headers_for
    ):
        gateway.error = PaymentGatewayError("Payment gateway timed out")

        response = client.post(
            "/api/payment-confirm",
            json={"application_id": accepted_application.id, "payment_intent_id": "pi_abc", "amount": 4500},
            headers=headers_for(employer),
        )

        assert response.status_code == 500
        assert response.json() == {"message": "Payment gateway timed out"}
        assert payment_crud.get_application_payments(db, accepted_application.id) == []

    def test_gateway_error_propagates_when_simulation_disabled(
        self, client, gateway, monkeypatch, employer, accepted_application, headers_for
    ):
        monkeypatch.setattr(config, "ALLOW_SIMULATED_PAYMENTS", False)
        gateway.error = PaymentGatewayError("Payment gateway timed out")

        response = client.post(
            "/api/payment-confirm",
            json={
                "application_id": accepted_application.id,
                "payment_intent_id": "pi_abc",
                "amount": 4500,
                "simulated_payment": True,
            },
            headers=headers_for(employer),
        )
        assert response.status_code == 500

    def test_simulated_without_gateway(self, client, employer, accepted_application, headers_for, db):
        app.dependency_overrides[get_payment_gateway] = lambda: None

        response = client.post(
            "/api/payment-confirm",
            json={"application_id": accepted_application.id, "amount": 5000, "simulated_payment": True},
            headers=headers_for(employer),
        )

        assert response.status_code == 200
        payments = payment_crud.get_application_payments(db, accepted_application.id)
        assert len(payments) == 1

    def test_simulated_rejected_when_disabled(self, client, monkeypatch, employer, accepted_application, headers_for):
        app.dependency_overrides[get_payment_gateway] = lambda: None
        monkeypatch.setattr(config, "ALLOW_SIMULATED_PAYMENTS", False)

        response = client.post(
            "/api/payment-confirm",
            json={"application_id": accepted_application.id, "amount": 5000, "simulated_payment": True},
            headers=headers_for(employer),
        )
        assert response.status_code == 400
        assert _task_status(client, accepted_application.id, headers_for(employer)) == "in-progress"

    def test_amount_required_without_intent(self, client, employer, accepted_application, headers_for):
        app.dependency_overrides[get_payment_gateway] = lambda: None

        response = client.post(
            "/api/payment-confirm",
            json={"application_id": accepted_application.id},
            headers=headers_for(employer),
        )
        assert response.status_code == 400

    def test_open_task_is_invalid_state(self, client, employer, application, headers_for):
        app.dependency_overrides[get_payment_gateway] = lambda: None

        response = client.post(
            "/api/payment-confirm",
            json={"application_id": application.id, "amount": 5000},
            headers=headers_for(employer),
        )
        assert response.status_code == 400
        assert response.json() == {"message": "Cannot mark payment for a task that is not in progress"}

    def test_unknown_application(self, client, employer, headers_for):
        app.dependency_overrides[get_payment_gateway] = lambda: None

        response = client.post(
            "/api/payment-confirm",
            json={"application_id": 9999, "amount": 5000},
            headers=headers_for(employer),
        )
        assert response.status_code == 404


class TestLegacyPayments:
    def test_owner_records_payment(self, client, employer, student, accepted_application, headers_for):
        response = client.post(
            "/api/payments",
            json={"application_id": accepted_application.id, "amount": 5000},
            headers=headers_for(employer),
        )

        assert response.status_code == 201
        assert response.json()["status"] == "completed"

        listed = client.get(
            f"/api/payments/application/{accepted_application.id}",
            headers=headers_for(student),
        )
        assert [p["id"] for p in listed.json()] == [response.json()["id"]]

    def test_student_cannot_record(self, client, student, accepted_application, headers_for):
        response = client.post(
            "/api/payments",
            json={"application_id": accepted_application.id, "amount": 5000},
            headers=headers_for(student),
        )
        assert response.status_code == 403

    def test_non_participant_cannot_view(self, client, other_student, accepted_application, headers_for):
        response = client.get(
            f"/api/payments/application/{accepted_application.id}",
            headers=headers_for(other_student),
        )
        assert response.status_code == 403
