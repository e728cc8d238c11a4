"""HTTP surface of the payment relay.

Storefront-facing endpoints for initializing and verifying Paystack payments,
plus health, connectivity and metrics probes. Anything else is a JSON 404.
"""

from datetime import datetime, timezone
from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from payrelay.common.config import settings
from payrelay.common.errors import RelayError, ValidationError
from payrelay.common.logging import configure_logging, logger, trace_id_ctx
from payrelay.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
    payment_failure_total,
    payment_requests_total,
    payment_success_total,
)
from payrelay.common.startup import log_startup_config
from payrelay.common.tracing import instrument_app, setup_tracing
from payrelay.services.relay.schemas import (
    ConnectionCheckResponse,
    HealthResponse,
    PaymentInitResponse,
    PaymentRequest,
    VerificationRequest,
    VerificationResponse,
)
from payrelay.services.relay.service import PaystackRelayService

NOT_FOUND_BODY = {"success": False, "message": "Endpoint not found"}

# (method, path) -> (metric operation label, failure message)
OPERATIONS: dict[tuple[str, str], tuple[str, str]] = {
    ("GET", "/test-paystack"): ("test_paystack", "Paystack connection failed"),
    ("POST", "/create-payment"): ("create_payment", "Payment initialization failed"),
    ("POST", "/verify-payment"): ("verify_payment", "Payment verification failed"),
}


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _operation(request: Request) -> tuple[str, str]:
    fallback = (request.url.path.strip("/").replace("-", "_") or "root", "Internal server error")
    return OPERATIONS.get((request.method, request.url.path), fallback)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def create_app(service: PaystackRelayService) -> FastAPI:
    """Build the relay app around an already-configured Paystack service."""

    service_name = service.service_name
    app = FastAPI(title="Payment Relay", docs_url=None, redoc_url=None, openapi_url=None)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=service.config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def unexpected_error_response(request: Request, exc: Exception) -> JSONResponse:
        """JSON 500 for anything the relay error handlers did not catch."""

        operation, message = _operation(request)
        payment_failure_total.labels(service=service_name, operation=operation, error_type="INTERNAL").inc()
        logger.exception("%s %s crashed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": message, "error": str(exc) or exc.__class__.__name__},
        )

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Tag the request with a trace id, record count and latency, and keep crashes JSON."""

        trace_id = request.headers.get("x-correlation-id") or str(uuid4())
        trace_id_ctx.set(trace_id)
        start = perf_counter()
        route = request.url.path
        method = request.method
        status_code = 500
        if (method, route) in OPERATIONS:
            payment_requests_total.labels(service=service_name, operation=_operation(request)[0]).inc()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                response = unexpected_error_response(request, exc)
            status_code = response.status_code
            route_obj = request.scope.get("route")
            if route_obj is not None and getattr(route_obj, "path", None):
                route = route_obj.path
            else:
                route = "unmatched"
            response.headers["x-correlation-id"] = trace_id
            return response
        finally:
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(
                service=service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        payment_failure_total.labels(
            service=service_name,
            operation=_operation(request)[0],
            error_type=exc.error_type,
        ).inc()
        logger.warning("%s %s failed status=%s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = ValidationError("Invalid request body", error=_describe_validation_errors(exc))
        return await relay_error_handler(request, error)

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and known paths with the wrong method look the same to callers.
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content=NOT_FOUND_BODY)
        return await http_exception_handler(request, exc)

    @app.get("/health", response_model=HealthResponse)
    def health():
        """Static identity plus the Paystack key mode; never calls out."""

        return HealthResponse(
            status="Backend is running",
            service=service.config.service_title,
            timestamp=_utc_timestamp(),
            paystack_mode=service.mode,
        )

    @app.get("/test-paystack", response_model=ConnectionCheckResponse)
    async def test_paystack():
        """Prove the configured key can reach Paystack."""

        mode = await service.check_connection()
        payment_success_total.labels(service=service_name, operation="test_paystack").inc()
        return ConnectionCheckResponse(mode=mode)

    @app.post("/create-payment", response_model=PaymentInitResponse)
    async def create_payment(req: PaymentRequest | None = None):
        """Initialize a Paystack transaction for one storefront order."""

        result = await service.initialize_payment(req or PaymentRequest())
        payment_success_total.labels(service=service_name, operation="create_payment").inc()
        return PaymentInitResponse(data=result)

    @app.post("/verify-payment", response_model=VerificationResponse)
    async def verify_payment(req: VerificationRequest | None = None):
        """Confirm with Paystack that a transaction ended in success."""

        result = await service.verify_payment((req or VerificationRequest()).reference)
        payment_success_total.labels(service=service_name, operation="verify_payment").inc()
        return VerificationResponse(payment_data=result)

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    instrument_app(app)
    return app


configure_logging(settings)
setup_tracing(settings)
log_startup_config(settings)
app = create_app(PaystackRelayService(settings))


def run() -> None:
    """Console entry point: serve the relay on the configured port."""

    logger.info("relay listening port=%s paystack_mode=%s", settings.port, settings.paystack_mode)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
