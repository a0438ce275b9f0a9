"""
Structured logging for the native auth service.

Every event carries the service name, the request id of the HTTP request
being served and, once a token is accepted, the account address. Token
material is never written out: values under the keys in ``REDACTED_KEYS``
are masked before rendering.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog

request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
address_var: ContextVar[Optional[str]] = ContextVar('address', default=None)

REDACTED_KEYS = frozenset({"token", "access_token", "accessToken", "signature", "authorization"})


def configure_logging(service_name: str, log_level: str = "info", json_output: bool = True) -> None:
    """Configure structlog and the stdlib root logger for a service."""

    def add_service_name(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            add_service_name,
            add_request_context,
            redact_token_material,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def add_request_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Attach the request id and authenticated address, when known."""
    request_id = request_id_var.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    address = address_var.get()
    if address:
        event_dict.setdefault("address", address)

    return event_dict


def redact_token_material(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind ``request_id`` (or a fresh uuid4) to the current context."""
    request_id = request_id or str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def set_address_context(address: Optional[str] = None):
    if address:
        address_var.set(address)


def clear_context():
    request_id_var.set(None)
    address_var.set(None)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
