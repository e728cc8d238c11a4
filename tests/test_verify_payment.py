"""`POST /verify-payment` against a fake Paystack."""

import httpx
import pytest


TRANSACTION = {
    "id": 4099260516,
    "status": "success",
    "reference": "ORD-1001",
    "amount": 250000,
    "currency": "NGN",
    "paid_at": "2024-08-22T09:15:02.000Z",
    "channel": "card",
    "customer": {"id": 181873746, "email": "ada@example.com"},
    "metadata": {"custom_fields": [{"variable_name": "order_id", "value": "ORD-1001"}]},
}


@pytest.mark.parametrize("body", [{}, {"reference": ""}, {"reference": 0}, {"reference": None}])
def test_missing_reference_is_rejected(client, paystack, body):
    """Absent, empty, zero or null references never reach Paystack."""

    resp = client.post("/verify-payment", json=body)

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Payment reference is required"}
    assert paystack.requests == []


def test_success_returns_payment_data(client, paystack):
    """A successful transaction is reshaped into paymentData."""

    paystack.reply(200, {"status": True, "message": "Verification successful", "data": TRANSACTION})

    resp = client.post("/verify-payment", json={"reference": "ORD-1001"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Payment verified successfully"
    assert body["paymentData"] == {
        "reference": "ORD-1001",
        "amount": 250000,
        "currency": "NGN",
        "status": "success",
        "paidAt": "2024-08-22T09:15:02.000Z",
        "channel": "card",
        "email": "ada@example.com",
        "metadata": TRANSACTION["metadata"],
    }
    request = paystack.last
    assert request.method == "GET"
    assert request.url.path == "/transaction/verify/ORD-1001"
    assert request.headers["authorization"] == "Bearer sk_test_abc123"


def test_numeric_reference_is_verified_as_string(client, paystack):
    """A non-zero numeric reference is passed through as text."""

    paystack.reply(200, {"status": True, "data": {**TRANSACTION, "reference": "1001"}})

    resp = client.post("/verify-payment", json={"reference": 1001})

    assert resp.status_code == 200
    assert paystack.last.url.path == "/transaction/verify/1001"


def test_non_success_transaction_reports_status(client, paystack):
    """Anything but "success" is a 400 that echoes the status."""

    paystack.reply(200, {"status": True, "data": {**TRANSACTION, "status": "abandoned"}})

    resp = client.post("/verify-payment", json={"reference": "ORD-1001"})

    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "message": "Payment not successful. Status: abandoned",
        "status": "abandoned",
    }


def test_missing_transaction_status_is_unknown(client, paystack):
    """A transaction without a status is reported as unknown."""

    paystack.reply(200, {"status": True, "data": {"reference": "ORD-1001"}})

    resp = client.post("/verify-payment", json={"reference": "ORD-1001"})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Payment not successful. Status: unknown"}


def test_non_dict_customer_leaves_email_empty(client, paystack):
    """A malformed customer block does not break an otherwise successful verification."""

    paystack.reply(200, {"status": True, "data": {**TRANSACTION, "customer": "x"}})

    resp = client.post("/verify-payment", json={"reference": "ORD-1001"})

    assert resp.status_code == 200
    assert resp.json()["paymentData"]["email"] is None


def test_non_dict_data_is_not_successful(client, paystack):
    """A success flag with no transaction object is not a verified payment."""

    paystack.reply(200, {"status": True, "data": "oops"})

    resp = client.post("/verify-payment", json={"reference": "ORD-1001"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_unexpected_transaction_shape_is_a_json_500(client, paystack):
    """A field the relay cannot reshape yields a JSON failure, not a plain-text crash."""

    paystack.reply(200, {"status": True, "data": {**TRANSACTION, "channel": {"type": "card"}}})

    resp = client.post("/verify-payment", json={"reference": "ORD-1001"})

    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json()["success"] is False
    assert resp.json()["message"] == "Payment verification failed"


def test_paystack_status_false_is_a_400(client, paystack):
    """Paystack refusing the verification is a 400, unlike initialization."""

    paystack.reply(200, {"status": False, "message": "Transaction reference not found"})

    resp = client.post("/verify-payment", json={"reference": "nope"})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Transaction reference not found"}


def test_paystack_http_error_is_a_500(client, paystack):
    """A non-2xx verify reply is a 500 carrying Paystack's message."""

    paystack.reply(404, {"status": False, "message": "Transaction reference not found"})

    resp = client.post("/verify-payment", json={"reference": "nope"})

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "message": "Payment verification failed",
        "error": "Transaction reference not found",
    }


def test_transport_failure_is_a_500(client, paystack):
    """Network failures during verification are 500s."""

    paystack.fail(httpx.ConnectError, "connection refused")

    resp = client.post("/verify-payment", json={"reference": "ORD-1001"})

    assert resp.status_code == 500
    assert resp.json()["error"] == "connection refused"


def test_reference_is_quoted_into_the_path(client, paystack):
    """Slashes and query characters cannot redirect the verify call."""

    paystack.reply(200, {"status": True, "data": TRANSACTION})

    client.post("/verify-payment", json={"reference": "ORD/1001?x=1"})

    assert paystack.last.url.raw_path == b"/transaction/verify/ORD%2F1001%3Fx%3D1"
