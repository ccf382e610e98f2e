from __future__ import annotations

from flask import Blueprint, redirect, url_for

from wanderlust.services.listing_service import get_listing
from wanderlust.services.review_service import create_review, delete_review
from wanderlust.utils.auth_gate import forbidden_redirect, login_required
from wanderlust.utils.context import get_request_context
from wanderlust.utils.errors import raise_for_result
from wanderlust.utils.payloads import ReviewBody, parse_payload

reviews_bp = Blueprint("reviews_bp", __name__, url_prefix="/listings/<listing_id>/reviews")


@reviews_bp.post("")
@login_required
def create(listing_id: str):
    ctx = get_request_context()
    found = raise_for_result(get_listing(listing_id))
    listing = found["listing"]
    payload, error = parse_payload(ReviewBody)
    if error is not None:
        raise_for_result(error)
    raise_for_result(create_review(ctx, listing, payload.review))
    ctx.flash("New Review Created!", "success")
    return redirect(url_for("listings_bp.show", listing_id=listing.id))


@reviews_bp.delete("/<review_id>")
@login_required
def destroy(listing_id: str, review_id: str):
    ctx = get_request_context()
    result = delete_review(ctx, listing_id, review_id)
    if result.get("error") == "FORBIDDEN":
        return forbidden_redirect(ctx, result)
    raise_for_result(result)
    ctx.flash("Review Deleted!", "success")
    return redirect(url_for("listings_bp.show", listing_id=result["listing_id"]))
