"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "finance-api", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "finance-api") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_installment_batch(
    request_id: str,
    user_id: str,
    group_id: str | None,
    count: int,
    policy: str,
    total_value: str,
) -> None:
    """Log a persisted installment batch"""
    logging.info(
        "Installment batch created",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "installments_created",
            "installment_group_id": group_id,
            "installment_count": count,
            "split_policy": policy,
            "total_value": total_value,
        },
    )


def log_envelope_payment(
    request_id: str,
    envelope_id: str,
    amount: str,
    amount_paid: str,
    installments_paid: int,
) -> None:
    logging.info(
        "Envelope installment paid",
        extra={
            "request_id": request_id,
            "envelope_id": envelope_id,
            "step": "envelope_paid",
            "amount": amount,
            "amount_paid": amount_paid,
            "installments_paid": installments_paid,
        },
    )


def log_auth_event(request_id: str, action: str, outcome: str, reason: str | None = None) -> None:
    """Log register/login outcome; the real failure reason never reaches the client"""
    level = logging.INFO if outcome == "success" else logging.WARNING
    logging.log(
        level,
        f"Auth {action} {outcome}",
        extra={
            "request_id": request_id,
            "step": f"auth_{action}",
            "outcome": outcome,
            "reason": reason,
        },
    )
