"""Error kinds raised by the order lifecycle and the refund ledger.

Every kind carries the usual ``{field: [message]}`` payload in ``messages``.
Business-rule failures extend protean's ``ValidationError`` and abort the unit
of work like any other domain validation failure. The subclasses only exist so
that callers (the HTTP layer, tests) can tell the kinds apart.
"""

from protean.exceptions import ObjectNotFoundError, ProteanExceptionWithMessage, ValidationError


class OrderNotFound(ObjectNotFoundError, ProteanExceptionWithMessage):
    """The referenced order does not exist."""


class ProductNotFound(ObjectNotFoundError, ProteanExceptionWithMessage):
    """The referenced product does not exist."""


class InvalidTransition(ValidationError):
    """Requested status is not reachable from the current status."""


class MissingTrackingInfo(ValidationError):
    """Entering ``shipped`` without a carrier and tracking number."""


class InvalidPaymentState(ValidationError):
    """Refund attempted against a payment that was never captured."""


class RefundExceedsLimit(ValidationError):
    """Refund amount is larger than the remaining refundable balance."""


class ConcurrentModification(ProteanExceptionWithMessage):
    """The order kept changing underneath the operation; retries exhausted."""


class PersistenceFailure(ProteanExceptionWithMessage):
    """Storage failed. The message is safe to show; the cause is not."""


class StockReconciliationFailed(PersistenceFailure):
    """Stock could not be restored for a cancelled order."""


# Raised to callers unchanged. Any other failure inside a workflow is storage.
EXPECTED_ERRORS = (ValidationError, ObjectNotFoundError, ConcurrentModification, PersistenceFailure)


def error_message(exc: Exception) -> str:
    """Flatten a protean exception payload into a single user-facing line."""
    messages = getattr(exc, "messages", None)
    if messages is None and exc.args:
        messages = exc.args[0]
    if isinstance(messages, dict):
        parts = []
        for value in messages.values():
            if isinstance(value, list | tuple):
                parts.extend(str(v) for v in value)
            else:
                parts.append(str(value))
        if parts:
            return "; ".join(parts)
    if messages:
        return str(messages)
    return str(exc)
