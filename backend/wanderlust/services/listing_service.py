from __future__ import annotations

from flask import current_app
from sqlalchemy.orm import selectinload

from wanderlust.extensions import db
from wanderlust.models import Listing, Review
from wanderlust.utils.context import RequestContext
from wanderlust.utils.errors import fail
from wanderlust.utils.keys import is_valid_key, normalize_key
from wanderlust.utils.payloads import ListingPayload

LISTING_NOT_FOUND = "Listing not found"
NOT_OWNER_MESSAGE = "You are not the owner of this listing!"


def check_listing_key(listing_id: str) -> dict:
    key = normalize_key(listing_id)
    if not is_valid_key(key):
        return fail("INVALID_ID", "Invalid ID format")
    return {"ok": True, "listing_id": key}


def list_listings() -> list[Listing]:
    return Listing.query.order_by(Listing.created_at.asc(), Listing.id.asc()).all()


def get_listing(listing_id: str, *, with_reviews: bool = False) -> dict:
    checked = check_listing_key(listing_id)
    if not checked["ok"]:
        return checked
    q = Listing.query
    if with_reviews:
        q = q.options(selectinload(Listing.reviews).joinedload(Review.author))
    listing = q.filter(Listing.id == checked["listing_id"]).first()
    if listing is None:
        return fail("NOT_FOUND", LISTING_NOT_FOUND)
    return {"ok": True, "listing": listing}


def get_owned_listing(ctx: RequestContext, listing_id: str) -> dict:
    found = get_listing(listing_id)
    if not found["ok"]:
        return found
    listing = found["listing"]
    if not listing.is_owned_by(ctx.user):
        return fail("FORBIDDEN", NOT_OWNER_MESSAGE, listing_id=listing.id)
    return found


def _apply_payload(listing: Listing, payload: ListingPayload) -> None:
    listing.title = payload.title
    listing.description = payload.description
    listing.price = float(payload.price)
    listing.location = payload.location
    listing.country = payload.country
    if payload.image is not None:
        listing.set_image(payload.image.filename, payload.image.url)


def create_listing(ctx: RequestContext, payload: ListingPayload) -> dict:
    listing = Listing(owner_id=ctx.user_id)
    _apply_payload(listing, payload)
    db.session.add(listing)
    db.session.commit()
    current_app.logger.info(
        "listing_created id=%s owner_id=%s request_id=%s", listing.id, listing.owner_id, ctx.request_id
    )
    return {"ok": True, "listing": listing}


def update_listing(ctx: RequestContext, listing_id: str, payload: ListingPayload) -> dict:
    found = get_owned_listing(ctx, listing_id)
    if not found["ok"]:
        return found
    listing = found["listing"]
    _apply_payload(listing, payload)
    db.session.add(listing)
    db.session.commit()
    current_app.logger.info("listing_updated id=%s request_id=%s", listing.id, ctx.request_id)
    return {"ok": True, "listing": listing}


def delete_listing(ctx: RequestContext, listing_id: str) -> dict:
    found = get_owned_listing(ctx, listing_id)
    if not found["ok"]:
        return found
    listing = found["listing"]
    review_count = len(listing.reviews)
    # Reviews go with the listing (delete-orphan cascade), in one commit.
    db.session.delete(listing)
    db.session.commit()
    current_app.logger.info(
        "listing_deleted id=%s reviews_deleted=%s request_id=%s", listing_id, review_count, ctx.request_id
    )
    return {"ok": True, "listing_id": normalize_key(listing_id)}
