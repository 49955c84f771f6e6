
"""Logs JSON (structlog) com a sessão do carrinho em contextvars.

`bind_session()` é chamado no início de cada request da API; todo evento
emitido depois disso carrega `session_id` até o próximo bind.
"""
from __future__ import annotations
import sys
import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

NO_SESSION = "-"

def bind_session(session_id: str | None) -> str:
    """Troca o contexto de log para a sessão informada."""
    clear_contextvars()
    sid = session_id or NO_SESSION
    bind_contextvars(session_id=sid)
    return sid

def _default_session(_, __, event: dict) -> dict:
    event.setdefault("session_id", NO_SESSION)
    return event

def get_logger(level: int = 20) -> structlog.stdlib.BoundLogger:
    structlog.configure(
        processors=[
            merge_contextvars,
            _default_session,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
    )
    return structlog.get_logger()
