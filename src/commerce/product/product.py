"""Product aggregate: the commerce view of a catalog product.

The catalog collaborator owns names, descriptions and categories; this core
owns the counters that must stay consistent with orders and reviews:

    stock, sold_count   mutated only through the Inventory Ledger
    rating              mutated only through the Rating Aggregator

Products are never deleted here, only deactivated.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Integer,
    String,
    ValueObject,
)

from commerce.domain import commerce
from commerce.errors import InsufficientStock, ProductUnavailable
from commerce.product.events import (
    LowStockDetected,
    ProductDeactivated,
    ProductPriceChanged,
    ProductRatingRecalculated,
    ProductRegistered,
    StockCommitted,
    StockReleased,
)


@commerce.value_object(part_of="Product")
class RatingSummary:
    """Denormalized average/count of a product's live reviews."""

    average = Float(default=0.0, min_value=0.0, max_value=5.0)
    count = Integer(default=0, min_value=0)

    @invariant.post
    def empty_summary_has_no_average(self):
        if self.count == 0 and self.average:
            raise ValidationError({"rating": ["A product without reviews cannot have an average rating"]})


@commerce.entity(part_of="Product")
class ProductImage:
    url = String(required=True, max_length=500)
    alt_text = String(max_length=255)
    is_primary = Boolean(default=False)


@commerce.aggregate
class Product:
    name = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    sold_count = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    low_stock_threshold = Integer(default=10, min_value=0)
    rating = ValueObject(RatingSummary)
    images = HasMany(ProductImage)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(cls, name, price, stock=0, images=None, low_stock_threshold=10):
        """Register a catalog product with the commerce core.

        Args:
            images: Optional list of dicts with url, alt_text, is_primary.
        """
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price=price,
            stock=stock,
            sold_count=0,
            is_active=True,
            low_stock_threshold=low_stock_threshold,
            rating=RatingSummary(average=0.0, count=0),
            created_at=now,
            updated_at=now,
        )
        for image in images or []:
            product.add_images(
                ProductImage(
                    url=image["url"],
                    alt_text=image.get("alt_text"),
                    is_primary=image.get("is_primary", False),
                )
            )

        product.raise_(
            ProductRegistered(
                product_id=str(product.id),
                name=name,
                price=price,
                stock=stock,
                registered_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def primary_image_url(self):
        """URL of the primary image, falling back to the first image."""
        if not self.images:
            return None
        primary = next((i for i in self.images if i.is_primary), None)
        return (primary or self.images[0]).url

    # -------------------------------------------------------------------
    # Catalog-facing changes
    # -------------------------------------------------------------------
    def change_price(self, new_price):
        if new_price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

        previous_price = self.price
        now = datetime.now(UTC)
        self.price = new_price
        self.updated_at = now

        self.raise_(
            ProductPriceChanged(
                product_id=str(self.id),
                previous_price=previous_price,
                new_price=new_price,
                changed_at=now,
            )
        )

    def deactivate(self):
        if not self.is_active:
            return

        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now

        self.raise_(ProductDeactivated(product_id=str(self.id), deactivated_at=now))

    # -------------------------------------------------------------------
    # Inventory (called only by the InventoryLedger)
    # -------------------------------------------------------------------
    def commit_stock(self, quantity):
        """Take `quantity` units off the shelf: stock down, sold count up."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if not self.is_active:
            raise ProductUnavailable(self.id, self.name)
        if self.stock < quantity:
            raise InsufficientStock(self.id, available=self.stock, requested=quantity, product_name=self.name)

        previous_stock = self.stock
        now = datetime.now(UTC)

        with atomic_change(self):
            self.stock = previous_stock - quantity
            self.sold_count = (self.sold_count or 0) + quantity
            self.updated_at = now

        self.raise_(
            StockCommitted(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=self.stock,
                new_sold_count=self.sold_count,
                committed_at=now,
            )
        )

        if self.stock <= self.low_stock_threshold:
            self.raise_(
                LowStockDetected(
                    product_id=str(self.id),
                    name=self.name,
                    current_stock=self.stock,
                    threshold=self.low_stock_threshold,
                    detected_at=now,
                )
            )

    def release_stock(self, quantity):
        """Put `quantity` previously committed units back on the shelf."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous_stock = self.stock
        now = datetime.now(UTC)

        with atomic_change(self):
            self.stock = previous_stock + quantity
            self.sold_count = max(0, (self.sold_count or 0) - quantity)
            self.updated_at = now

        self.raise_(
            StockReleased(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=self.stock,
                new_sold_count=self.sold_count,
                released_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Ratings (called only by the RatingAggregator)
    # -------------------------------------------------------------------
    def update_rating(self, average, count):
        now = datetime.now(UTC)
        self.rating = RatingSummary(average=average, count=count)
        self.updated_at = now

        self.raise_(
            ProductRatingRecalculated(
                product_id=str(self.id),
                average=average,
                count=count,
                recalculated_at=now,
            )
        )
