"""Order lookup and the optimistic-concurrency retry loop shared by the workflows."""

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.errors import ConcurrentModification, OrderNotFound, PersistenceFailure
from ordering.order.order import Order

logger = structlog.get_logger(__name__)

MAX_CONFLICT_RETRIES = 3


def load_order(order_id) -> Order:
    """Fetch an order or raise ``OrderNotFound``."""
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound({"order_id": ["Order not found"]}) from None


def reload_committed_order(order_id, operation: str, failure: dict) -> Order:
    """Re-read an order whose unit of work has already committed.

    The change is durable at this point, so a failed read is a storage failure.
    """
    try:
        return load_order(order_id)
    except Exception as exc:
        logger.exception("order_reload_failed", operation=operation, order_id=str(order_id))
        raise PersistenceFailure(failure) from exc


def process_with_retry(build_command, order_id, operation: str):
    """Process the command from ``build_command()``, re-running it on version conflicts.

    Every attempt is a fresh unit of work that re-reads the order, so limits
    checked inside the handler see the state left by the competing writer.
    """
    for attempt in range(1, MAX_CONFLICT_RETRIES + 1):
        try:
            return current_domain.process(build_command(), asynchronous=False)
        except ExpectedVersionError:
            logger.warning(
                "order_version_conflict",
                operation=operation,
                order_id=str(order_id),
                attempt=attempt,
            )

    raise ConcurrentModification(
        {"order_id": ["The order was modified concurrently, please retry the request"]}
    )
