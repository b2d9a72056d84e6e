"""Caller-traceable order references.

A reference is ``ORD-<first 8 hex chars of the customer id>-<epoch ms>``. Two
checkouts by the same customer in the same millisecond would collide, so a
taken candidate is regenerated with a ``-<n>`` suffix a bounded number of
times before giving up.
"""

import time

import structlog
from protean.utils.globals import current_domain

from storefront.ordering.order import Order
from storefront.shared.errors import InternalError

logger = structlog.get_logger(__name__)


class OrderReferences:
    def __init__(self, attempts: int = 5, clock=time.time) -> None:
        self.attempts = attempts
        self._clock = clock

    def candidate(self, customer_id, suffix: int = 0) -> str:
        prefix = str(customer_id).replace("-", "")[:8].upper()
        reference = f"ORD-{prefix}-{int(self._clock() * 1000)}"
        return f"{reference}-{suffix}" if suffix else reference

    def next_reference(self, customer_id) -> str:
        repo = current_domain.repository_for(Order)
        for suffix in range(self.attempts):
            reference = self.candidate(customer_id, suffix)
            if repo.find_by_reference(reference) is None:
                return reference
            logger.info("Order reference taken, regenerating", reference=reference)

        raise InternalError(
            f"Could not generate a unique order reference after {self.attempts} attempts",
            customer_id=str(customer_id),
        )
