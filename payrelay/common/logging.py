"""JSON logging for the relay, tagged with the request's trace id and payment reference."""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from payrelay.common.config import RelaySettings


trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")
reference_ctx: ContextVar[str] = ContextVar("reference", default="")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(service_name)s %(trace_id)s %(reference)s %(message)s"


class RequestContextFilter(logging.Filter):
    """Stamp each record with the relay name and the current request's identifiers."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        record.trace_id = trace_id_ctx.get()
        record.reference = reference_ctx.get()
        return True


def configure_logging(config: RelaySettings) -> None:
    """Send all records to stdout as JSON; replaces any existing root handlers."""

    context_filter = RequestContextFilter(config.service_name)
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(context_filter)
    handler.setFormatter(JsonFormatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(config.log_level.upper())
    root.addFilter(context_filter)


logger = logging.getLogger("payrelay")
