"""RemoveReview: the author withdraws a review (soft removal)."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.errors import Unauthorized
from commerce.review.review import Review


@commerce.command(part_of="Review")
class RemoveReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)


@commerce.command_handler(part_of=Review)
class RemoveReviewHandler:
    @handle(RemoveReview)
    def remove_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.fetch(command.review_id)

        if not review.is_authored_by(command.user_id):
            raise Unauthorized("Only the review author can delete this review", user_id=command.user_id)

        review.remove()
        repo.add(review)
        return review
