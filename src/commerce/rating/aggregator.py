"""Rating Aggregator: keeps Product.rating equal to the live review set.

Every recomputation starts from scratch over the product's Published
reviews, so running it twice, or after any sequence of review writes, gives
the same summary:

    average = mean of scores, rounded half-up to one decimal
    count   = number of live reviews
    no reviews → 0.0 / 0
"""

from decimal import ROUND_HALF_UP, Decimal

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.product.product import Product
from commerce.review.events import ReviewEdited, ReviewRemoved, ReviewSubmitted
from commerce.review.review import Review

logger = structlog.get_logger(__name__)


def summarize(scores) -> tuple[float, int]:
    """(average, count) for a list of integer scores."""
    count = len(scores)
    if count == 0:
        return 0.0, 0
    average = (Decimal(sum(scores)) / Decimal(count)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(average), count


class RatingAggregator:
    def __init__(self, domain=None):
        self._domain = domain

    def _repository_for(self, cls):
        return (self._domain or current_domain).repository_for(cls)

    def recompute(self, product_id) -> tuple[float, int]:
        """Rewrite a product's rating summary from its live reviews."""
        reviews = self._repository_for(Review).live_for_product(product_id)
        average, count = summarize([review.rating.score for review in reviews])

        product_repo = self._repository_for(Product)
        product = product_repo.get(product_id)
        if product.rating and product.rating.average == average and product.rating.count == count:
            return average, count

        product.update_rating(average, count)
        product_repo.add(product)

        logger.info("rating_recomputed", product_id=str(product_id), average=average, count=count)
        return average, count


@commerce.event_handler(part_of=Review)
class RatingRecalculationHandler:
    """Recomputes the product rating after every review write."""

    def _recompute(self, product_id):
        try:
            RatingAggregator().recompute(product_id)
        except ObjectNotFoundError:
            logger.warning("rating_product_missing", product_id=str(product_id))

    @handle(ReviewSubmitted)
    def on_review_submitted(self, event: ReviewSubmitted) -> None:
        self._recompute(event.product_id)

    @handle(ReviewEdited)
    def on_review_edited(self, event: ReviewEdited) -> None:
        self._recompute(event.product_id)

    @handle(ReviewRemoved)
    def on_review_removed(self, event: ReviewRemoved) -> None:
        self._recompute(event.product_id)
