"""ReplyToReview: the store answers a review. Does not affect the rating."""

from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.errors import Unauthorized
from commerce.review.review import Review
from commerce.roles import is_admin


@commerce.command(part_of="Review")
class ReplyToReview:
    review_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    admin_role = String(required=True, max_length=20)
    comment = Text(required=True)


@commerce.command_handler(part_of=Review)
class ReplyToReviewHandler:
    @handle(ReplyToReview)
    def reply_to_review(self, command):
        if not is_admin(command.admin_role):
            raise Unauthorized("Only administrators can reply to reviews", user_id=command.admin_id)

        repo = current_domain.repository_for(Review)
        review = repo.fetch(command.review_id)
        review.reply(admin_id=command.admin_id, comment=command.comment)
        repo.add(review)
        return review
