"""Paystack relay: validates storefront input, calls Paystack, reshapes replies.

One outbound call per operation, never retried. The secret key only ever
travels from settings to the Authorization header.
"""

import math
from urllib.parse import quote

import httpx

from payrelay.common.config import RelaySettings
from payrelay.common.errors import GatewayError, ValidationError, VerificationError
from payrelay.common.logging import logger, reference_ctx
from payrelay.common.metrics import paystack_call_seconds
from payrelay.services.relay.schemas import PaymentInitResult, PaymentRequest, VerificationResult


CURRENCY = "NGN"
MINIMUM_AMOUNT = 100
SUCCESS_STATUS = "success"


def to_minor_units(amount: float) -> int:
    """Naira to kobo, rounding half up."""

    return math.floor(amount * 100 + 0.5)


def build_initialize_payload(req: PaymentRequest, callback_url: str) -> dict:
    """Paystack `transaction/initialize` body for one storefront order."""

    return {
        "email": req.email,
        "amount": to_minor_units(req.amount),
        "currency": CURRENCY,
        "reference": req.order_id,
        "callback_url": callback_url,
        "metadata": {
            "custom_fields": [
                {"display_name": "Order ID", "variable_name": "order_id", "value": req.order_id},
                {"display_name": "Customer Name", "variable_name": "customer_name", "value": req.display_name},
                {"display_name": "Customer Phone", "variable_name": "customer_phone", "value": req.display_phone},
                {"display_name": "Items Count", "variable_name": "items_count", "value": req.items_count},
            ]
        },
    }


def provider_error_detail(exc: Exception) -> str:
    """Prefer Paystack's own error message, fall back to the transport error text."""

    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return str(exc) or exc.__class__.__name__


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


class PaystackRelayService:
    """Stateless bridge between the storefront and the Paystack REST API."""

    def __init__(self, config: RelaySettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self.transport = transport
        self.service_name = config.service_name

    @property
    def mode(self) -> str:
        return self.config.paystack_mode

    def _headers(self) -> dict[str, str]:
        key = self.config.paystack_secret_key
        return {"Authorization": f"Bearer {key}"} if key else {}

    async def _call(self, endpoint: str, method: str, path: str, failure_message: str, **kwargs) -> dict:
        """Make one Paystack call; transport failures and non-2xx become GatewayError."""

        try:
            with paystack_call_seconds.labels(service=self.service_name, endpoint=endpoint).time():
                async with httpx.AsyncClient(
                    base_url=self.config.paystack_base_url,
                    headers=self._headers(),
                    timeout=self.config.paystack_timeout_seconds,
                    transport=self.transport,
                ) as client:
                    resp = await client.request(method, path, **kwargs)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            detail = provider_error_detail(exc)
            logger.error("paystack %s error: %s", endpoint, detail)
            raise GatewayError(failure_message, error=detail) from exc
        return body if isinstance(body, dict) else {}

    async def check_connection(self) -> str:
        """List a single transaction to prove the key and network path work."""

        await self._call(
            "list_transactions",
            "GET",
            "/transaction",
            "Paystack connection failed",
            params={"perPage": 1},
        )
        logger.info("paystack connection ok mode=%s", self.mode)
        return self.mode

    async def initialize_payment(self, req: PaymentRequest) -> PaymentInitResult:
        missing = req.missing_fields()
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if req.amount < MINIMUM_AMOUNT:
            raise ValidationError("Amount must be at least ₦1 (100 kobo)")
        if not math.isfinite(req.amount * 100):
            raise ValidationError("Amount is too large")

        reference_ctx.set(req.order_id)
        logger.info("initializing payment order_id=%s amount=%s", req.order_id, req.amount)
        body = await self._call(
            "initialize",
            "POST",
            "/transaction/initialize",
            "Payment initialization failed",
            json=build_initialize_payload(req, self.config.callback_url),
        )
        if not body.get("status"):
            detail = body.get("message") or "Failed to initialize payment"
            logger.error("payment initialization rejected order_id=%s: %s", req.order_id, detail)
            raise GatewayError("Payment initialization failed", error=detail)

        data = _as_dict(body.get("data"))
        result = PaymentInitResult(
            authorization_url=data.get("authorization_url"),
            access_code=data.get("access_code"),
            reference=data.get("reference"),
        )
        logger.info("payment initialized email=%s reference=%s", req.email, result.reference)
        return result

    async def verify_payment(self, reference: str | None) -> VerificationResult:
        if not reference:
            raise ValidationError("Payment reference is required")

        reference_ctx.set(reference)
        logger.info("verifying payment reference=%s", reference)
        body = await self._call(
            "verify",
            "GET",
            f"/transaction/verify/{quote(reference, safe='')}",
            "Payment verification failed",
        )
        # Rejections here are 400, unlike initialize's 500.
        if not body.get("status"):
            detail = body.get("message") or "Payment verification failed"
            logger.warning("payment verification rejected reference=%s: %s", reference, detail)
            raise GatewayError(detail, status_code=400)

        transaction = _as_dict(body.get("data"))
        status = transaction.get("status")
        if status != SUCCESS_STATUS:
            logger.warning("payment not successful reference=%s status=%s", reference, status)
            raise VerificationError(f"Payment not successful. Status: {status or 'unknown'}", status=status)

        customer = _as_dict(transaction.get("customer"))
        logger.info("payment verified reference=%s", reference)
        return VerificationResult(
            reference=transaction.get("reference"),
            amount=transaction.get("amount"),
            currency=transaction.get("currency"),
            status=status,
            paid_at=transaction.get("paid_at"),
            channel=transaction.get("channel"),
            email=customer.get("email"),
            metadata=transaction.get("metadata"),
        )
