"""Inventory Ledger: the only path through which stock and sold counts move.

    reserve_and_commit(product_id, quantity)
        stock -= quantity, sold_count += quantity, only if stock >= quantity
    release(product_id, quantity)
        stock += quantity, sold_count -= quantity (never below zero)

Each call is a read-modify-write of one Product aggregate persisted through
its repository. When called from a command handler the change joins the
handler's Unit of Work and is committed (or rolled back) with it.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from commerce.errors import ProductUnavailable
from commerce.product.product import Product

logger = structlog.get_logger(__name__)


class InventoryLedger:
    """Counter adjustments on Product aggregates."""

    def __init__(self, domain=None):
        self._domain = domain

    @property
    def repository(self):
        return (self._domain or current_domain).repository_for(Product)

    def _load(self, product_id):
        try:
            return self.repository.get(product_id)
        except ObjectNotFoundError:
            raise ProductUnavailable(product_id) from None

    def reserve_and_commit(self, product_id, quantity: int) -> Product:
        """Commit `quantity` units of a product to a sale.

        Raises:
            InsufficientStock: stock is below `quantity`; nothing changes.
            ProductUnavailable: the product is missing or inactive.
        """
        product = self._load(product_id)
        product.commit_stock(quantity)
        self.repository.add(product)

        logger.info(
            "stock_committed",
            product_id=str(product.id),
            quantity=quantity,
            stock=product.stock,
            sold_count=product.sold_count,
        )
        if product.stock <= product.low_stock_threshold:
            logger.warning(
                "low_stock",
                product_id=str(product.id),
                stock=product.stock,
                threshold=product.low_stock_threshold,
            )
        return product

    def release(self, product_id, quantity: int) -> Product:
        """Return `quantity` previously committed units to stock.

        Releasing to an inactive product is allowed; a missing product raises
        ProductUnavailable.
        """
        product = self._load(product_id)
        product.release_stock(quantity)
        self.repository.add(product)

        logger.info(
            "stock_released",
            product_id=str(product.id),
            quantity=quantity,
            stock=product.stock,
            sold_count=product.sold_count,
        )
        return product

    def commit_all(self, lines) -> None:
        """Commit every (product_id, quantity) line, or none of them.

        If a line fails, the lines already committed are released in reverse
        order before the error is re-raised.
        """
        committed = []
        try:
            for product_id, quantity in lines:
                self.reserve_and_commit(product_id, quantity)
                committed.append((product_id, quantity))
        except Exception as exc:
            if committed:
                logger.warning(
                    "stock_commit_compensating",
                    failed_error=type(exc).__name__,
                    releasing=[str(pid) for pid, _ in committed],
                )
                for product_id, quantity in reversed(committed):
                    self.release(product_id, quantity)
            raise

    def release_all(self, lines) -> None:
        for product_id, quantity in lines:
            self.release(product_id, quantity)
