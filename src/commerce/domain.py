"""Commerce bounded context: Inventory, Cart, Checkout, Order Lifecycle and Ratings.

A single bounded context so that checkout can convert a cart into an order
and adjust product inventory inside one Unit of Work.
"""

from protean.domain import Domain

from commerce.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
commerce = Domain(name="commerce")
