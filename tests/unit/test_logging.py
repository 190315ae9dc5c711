"""Unit tests for structured JSON logging"""

import json
import logging
from edunexia_charges.infrastructure.observability.logging import CustomJsonFormatter, log_charge_submission


def test_formatter_emits_service_metadata():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    record = logging.LogRecord("edunexia", logging.WARNING, __file__, 1, "Charge rejected", None, None)
    record.field = "billing_methods"

    data = json.loads(formatter.format(record))

    assert data["message"] == "Charge rejected"
    assert data["level"] == "WARNING"
    assert data["service"] == "edunexia-charges"
    assert data["field"] == "billing_methods"
    assert data["timestamp"]


def test_log_charge_submission_fields(caplog):
    with caplog.at_level(logging.INFO):
        log_charge_submission("req-1", "cus_1", 10000, 3, "submitted", 12.5, charge_id="pay_1")

    record = caplog.records[-1]
    assert record.getMessage() == "Charge submission completed"
    assert record.outcome == "submitted"
    assert record.installment_count == 3
    assert record.charge_id == "pay_1"
