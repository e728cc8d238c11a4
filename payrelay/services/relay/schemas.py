"""Request/response schemas for the relay endpoints.

Field names follow the storefront's camelCase JSON; Paystack's own snake_case
names are kept where the storefront receives them verbatim.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_CUSTOMER_NAME = "Customer"
DEFAULT_CUSTOMER_PHONE = "Not provided"


def _blank_as_missing(value: Any) -> Any:
    # Runs before str coercion so 0 stays missing instead of becoming "0".
    return value or None


class PaymentRequest(BaseModel):
    """Payload accepted by `POST /create-payment`.

    Every field is optional at the schema level so that missing required
    fields surface as one relay validation error listing all of them.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    order_id: str | None = Field(default=None, alias="orderId")
    amount: float | None = Field(default=None, allow_inf_nan=False)
    email: str | None = None
    customer_name: str | None = Field(default=None, alias="customerName")
    customer_phone: str | None = Field(default=None, alias="customerPhone")
    items: list[Any] | None = None
    metadata: Any = None

    ids_blank_as_missing = field_validator("order_id", "email", mode="before")(_blank_as_missing)

    def missing_fields(self) -> list[str]:
        """Names of required fields that are absent, empty or zero."""

        required = {"orderId": self.order_id, "amount": self.amount, "email": self.email}
        return [name for name, value in required.items() if not value]

    @property
    def display_name(self) -> str:
        return self.customer_name or DEFAULT_CUSTOMER_NAME

    @property
    def display_phone(self) -> str:
        return self.customer_phone or DEFAULT_CUSTOMER_PHONE

    @property
    def items_count(self) -> int:
        return len(self.items) if self.items else 0


class VerificationRequest(BaseModel):
    """Payload accepted by `POST /verify-payment`."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    reference: str | None = None

    reference_blank_as_missing = field_validator("reference", mode="before")(_blank_as_missing)


class PaymentInitResult(BaseModel):
    authorization_url: str | None = None
    access_code: str | None = None
    reference: str | None = None


class PaymentInitResponse(BaseModel):
    success: bool = True
    message: str = "Payment initialized successfully"
    data: PaymentInitResult


class VerificationResult(BaseModel):
    """Transaction fields echoed back after a successful verification."""

    model_config = ConfigDict(populate_by_name=True)

    reference: str | None = None
    amount: int | float | None = None
    currency: str | None = None
    status: str | None = None
    paid_at: str | None = Field(default=None, alias="paidAt")
    channel: str | None = None
    email: str | None = None
    metadata: Any = None


class VerificationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Payment verified successfully"
    payment_data: VerificationResult = Field(alias="paymentData")


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    service: str
    timestamp: str
    paystack_mode: str = Field(alias="paystackMode")


class ConnectionCheckResponse(BaseModel):
    success: bool = True
    message: str = "Paystack connection successful"
    mode: str
