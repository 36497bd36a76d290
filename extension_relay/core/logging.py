"""Relay logging: correlation ids per extension call and credential scrubbing."""

import logging
import re
import sys
import uuid
from contextvars import ContextVar

REQUEST_ID_HEADER = "X-Request-ID"
REDACTED = "[redacted]"

# Id of the extension call currently being relayed
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

_INCOMING_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

# Bearer headers and Hugging Face access tokens (hf_ plus at least 20 alphanumerics)
_SECRET_RES = (
    re.compile(r"(Bearer\s+)[^\s'\",]+", re.IGNORECASE),
    re.compile(r"\bhf_[A-Za-z0-9]{20,}"),
)


def redact(text: str) -> str:
    """Mask credentials that would otherwise leak through upstream errors or debug dumps."""
    text = _SECRET_RES[0].sub(rf"\g<1>{REDACTED}", text)
    return _SECRET_RES[1].sub(REDACTED, text)


class RelayLogFilter(logging.Filter):
    """Tag each record with the relay call id and scrub credentials from its message."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("-")  # type: ignore[attr-defined]
        message = record.getMessage()
        scrubbed = redact(message)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = None
        return True


def resolve_request_id(incoming: str | None) -> str:
    """Keep the extension's own X-Request-ID when it is well formed, otherwise mint a 12-hex id."""
    if incoming and _INCOMING_ID_RE.match(incoming):
        return incoming
    return uuid.uuid4().hex[:12]


def setup_logging(level: str = "INFO") -> None:
    """Route all relay logging to one stderr handler.

    Args:
        level: Log level name; unknown names fall back to INFO.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s relay[%(request_id)s] %(name)s: %(message)s"))
    handler.addFilter(RelayLogFilter())

    root = logging.getLogger()
    root.setLevel(numeric_level)
    # create_app may run more than once per process (tests, reload)
    root.handlers.clear()
    root.addHandler(handler)

    # httpx logs every upstream URL at INFO; the middleware already covers each call
    for chatty in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(chatty).setLevel(max(numeric_level, logging.WARNING))
