"""Catalog intake: commands the catalog collaborator uses to feed products in.

These are the only writes to a Product outside the Inventory Ledger and the
Rating Aggregator, and none of them touch stock counters or the rating.
"""

import json

from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.product.product import Product


@commerce.command(part_of="Product")
class RegisterProduct:
    name = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=10, min_value=0)
    images = Text()  # JSON array of {url, alt_text, is_primary}


@commerce.command(part_of="Product")
class ChangeProductPrice:
    product_id = Identifier(required=True)
    new_price = Float(required=True, min_value=0.0)


@commerce.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@commerce.command_handler(part_of=Product)
class CatalogIntakeHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        images = json.loads(command.images) if command.images else []
        product = Product.register(
            name=command.name,
            price=command.price,
            stock=command.stock or 0,
            images=images,
            low_stock_threshold=command.low_stock_threshold if command.low_stock_threshold is not None else 10,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ChangeProductPrice)
    def change_product_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.change_price(command.new_price)
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
