"""Ordering bounded context: order lifecycle and refund ledger.

Governs how an order moves through its fulfillment states, applies the side
effects of each transition (stock restoration, tracking assignment) in the
same unit of work, and keeps the append-only refund ledger reconciled
against the order total.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
