"""EditReview: the author changes the rating or the comment."""

from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.errors import Unauthorized
from commerce.review.review import Review


@commerce.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)  # Must match original author
    rating = Integer()
    comment = Text()


@commerce.command_handler(part_of=Review)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.fetch(command.review_id)

        if not review.is_authored_by(command.user_id):
            raise Unauthorized("Only the review author can edit this review", user_id=command.user_id)

        kwargs = {}
        if command.rating is not None:
            kwargs["rating"] = command.rating
        if command.comment is not None:
            kwargs["comment"] = command.comment

        review.edit(**kwargs)
        repo.add(review)
        return review
