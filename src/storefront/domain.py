"""Storefront domain: catalogue stock, customers, orders and payments.

A single bounded context: the checkout transaction has to debit stock and
record the order inside one unit of work, so products, customers, orders and
reconciliation items share one domain and one set of providers.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
