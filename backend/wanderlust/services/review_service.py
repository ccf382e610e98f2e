from __future__ import annotations

from flask import current_app

from wanderlust.extensions import db
from wanderlust.models import Review
from wanderlust.utils.context import RequestContext
from wanderlust.utils.errors import fail
from wanderlust.utils.keys import is_valid_key, normalize_key
from wanderlust.utils.payloads import ReviewPayload

REVIEW_NOT_FOUND = "Review not found"
NOT_AUTHOR_MESSAGE = "You are not the author of this review!"


def create_review(ctx: RequestContext, listing, payload: ReviewPayload) -> dict:
    """Attach a new review to ``listing``.

    The review row and the listing's review list are written in a single
    commit, so a failure leaves neither an orphaned review nor a dangling
    reference.
    """
    review = Review(
        comment=payload.comment,
        rating=int(payload.rating),
        author_id=ctx.user_id,
    )
    listing.reviews.append(review)
    db.session.add(review)
    db.session.add(listing)
    db.session.commit()
    current_app.logger.info(
        "review_created id=%s listing_id=%s author_id=%s request_id=%s",
        review.id,
        listing.id,
        review.author_id,
        ctx.request_id,
    )
    return {"ok": True, "review": review}


def delete_review(ctx: RequestContext, listing_id: str, review_id: str) -> dict:
    """Pull ``review_id`` out of the listing's review list and delete it.

    Pulling a review the listing does not hold is a no-op; the review row is
    deleted either way. Both happen in one commit.
    """
    listing_key = normalize_key(listing_id)
    review_key = normalize_key(review_id)
    if not is_valid_key(listing_key) or not is_valid_key(review_key):
        return fail("INVALID_ID", "Invalid ID format")

    review = db.session.get(Review, review_key)
    if review is None:
        return fail("NOT_FOUND", REVIEW_NOT_FOUND)
    if not review.is_authored_by(ctx.user):
        return fail("FORBIDDEN", NOT_AUTHOR_MESSAGE, listing_id=listing_key)

    pulled = review.listing_id == listing_key
    if pulled:
        review.listing.reviews.remove(review)
    db.session.delete(review)
    db.session.commit()
    current_app.logger.info(
        "review_deleted id=%s listing_id=%s pulled=%s request_id=%s",
        review_key,
        listing_key,
        pulled,
        ctx.request_id,
    )
    return {"ok": True, "review_id": review_key, "listing_id": listing_key, "pulled": pulled}
