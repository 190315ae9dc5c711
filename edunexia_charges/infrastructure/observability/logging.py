"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger.json import JsonFormatter


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "edunexia-charges"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_charge_submission(
    request_id: str,
    customer_id: str,
    total_cents: int,
    installment_count: int,
    outcome: str,
    duration_ms: float,
    charge_id: Optional[str] = None,
) -> None:
    """Log structured charge submission outcome"""
    logging.info(
        "Charge submission completed",
        extra={
            "request_id": request_id,
            "customer_id": customer_id,
            "step": "charge_submit",
            "outcome": outcome,
            "total_cents": total_cents,
            "installment_count": installment_count,
            "charge_id": charge_id,
            "duration_ms": duration_ms,
        },
    )
