"""SubmitReview: one live review per user per product."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.errors import DuplicateReview, NotFound
from commerce.product.product import Product
from commerce.review.review import Review


@commerce.command(part_of="Review")
class SubmitReview:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()


@commerce.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        try:
            current_domain.repository_for(Product).get(command.product_id)
        except ObjectNotFoundError:
            raise NotFound("Product", command.product_id) from None

        repo = current_domain.repository_for(Review)
        if repo.live_by(command.user_id, command.product_id) is not None:
            raise DuplicateReview(command.user_id, command.product_id)

        review = Review.submit(
            product_id=command.product_id,
            user_id=command.user_id,
            rating=command.rating,
            comment=command.comment,
        )

        # A concurrent submission that slipped past `live_by` trips the unique key
        try:
            repo.add(review)
        except ValidationError as exc:
            if isinstance(exc.messages, dict) and "author_product" in exc.messages:
                raise DuplicateReview(command.user_id, command.product_id) from None
            raise
        return review
