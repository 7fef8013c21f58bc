"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from gaston_budget.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_ledger_write(
    request_id: str,
    entity_id: str,
    year_month: str,
    operation: str,
    revision: int,
) -> None:
    """Log a ledger document replacement"""
    logging.info(
        "Ledger updated",
        extra={
            "request_id": request_id,
            "entity_id": entity_id,
            "year_month": year_month,
            "step": operation,
            "revision": revision,
        },
    )


def log_budget_applied(
    request_id: str,
    entity_id: str,
    year_month: str,
    pay_frequency: str,
    entry_count: int,
) -> None:
    """Log a destructive budget materialization for audit"""
    logging.info(
        "Budget applied to month",
        extra={
            "request_id": request_id,
            "entity_id": entity_id,
            "year_month": year_month,
            "step": "apply_budget",
            "pay_frequency": pay_frequency,
            "entry_count": entry_count,
        },
    )


def log_amortization(
    request_id: str,
    months_to_payoff: int,
    converged: bool,
    duration_ms: float,
) -> None:
    logging.info(
        "Amortization simulated",
        extra={
            "request_id": request_id,
            "step": "amortization",
            "months_to_payoff": months_to_payoff,
            "converged": converged,
            "duration_ms": duration_ms,
        },
    )
