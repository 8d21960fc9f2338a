"""
Reconcile Ledgers Lambda Handler
================================

Lambda entry point for reconciling an uploaded bank statement against
the book ledger. Triggered by API Gateway from the web dashboard.
"""

import base64
import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from models import ReconciliationResult
from utils import get_settings

from engine import reconcile

# Initialize AWS Lambda Powertools
logger = Logger()
metrics = Metrics(namespace="LedgerReconciliation")
tracer = Tracer()

FORMAT_ERROR_MESSAGE = "Unable to read ledger files. Please check the file format."


@logger.inject_lambda_context
@metrics.log_metrics
@tracer.capture_lambda_handler
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """
    Main Lambda handler for reconciling ledgers.

    Expected payload:
    {
        "bank_csv": "raw bank statement text",
        "book_csv": "raw book ledger text"
    }
    """
    logger.info("Received reconciliation request")

    try:
        body = _parse_request_body(event)
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid request body: {e}")
        return _error_response(400, "Request body must be a JSON object")

    bank_csv = body.get("bank_csv")
    book_csv = body.get("book_csv")

    if bank_csv is None or book_csv is None:
        return _error_response(400, "Missing bank_csv or book_csv in request body")

    try:
        result = process_reconciliation(bank_csv, book_csv)
    except Exception as e:
        logger.exception(f"Reconciliation failed: {e}")
        metrics.add_metric(name="ReconciliationErrors", unit=MetricUnit.Count, value=1)
        return _error_response(422, FORMAT_ERROR_MESSAGE)

    _record_metrics(result)

    return _success_response(result.to_dict())


@tracer.capture_method
def process_reconciliation(bank_csv: Any, book_csv: Any) -> ReconciliationResult:
    """Run the reconciliation engine with environment settings."""
    result = reconcile(bank_csv, book_csv, get_settings())
    logger.info(result.to_summary())
    return result


def _record_metrics(result: ReconciliationResult) -> None:
    """Record CloudWatch metrics."""
    stats = result.stats

    metrics.add_metric(name="ReconciliationsCompleted", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name="BankRecords", unit=MetricUnit.Count, value=stats.total_bank)
    metrics.add_metric(name="BookRecords", unit=MetricUnit.Count, value=stats.total_book)
    metrics.add_metric(name="MatchedItems", unit=MetricUnit.Count, value=stats.matched_count)
    metrics.add_metric(name="FlaggedItems", unit=MetricUnit.Count, value=stats.flagged_count)

    if stats.match_rate is not None:
        metrics.add_metric(name="MatchRate", unit=MetricUnit.Percent, value=stats.match_rate)


def _parse_request_body(event: dict) -> dict:
    """Parse request body from API Gateway event, or use a direct payload."""
    if "body" not in event:
        return event

    body = event.get("body") or "{}"
    if isinstance(body, str):
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")
        body = json.loads(body)

    if not isinstance(body, dict):
        raise ValueError("body is not an object")
    return body


def _success_response(data: dict) -> dict:
    """Create success API Gateway response."""
    return {
        "statusCode": 200,
        "headers": {
            "Content-Type": "application/json"
        },
        "body": json.dumps(data)
    }


def _error_response(status_code: int, message: str) -> dict:
    """Create error API Gateway response."""
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json"
        },
        "body": json.dumps({"error": message})
    }
