from __future__ import annotations

from flask import Blueprint, redirect, render_template, url_for

from wanderlust.services.listing_service import (
    create_listing,
    delete_listing,
    get_listing,
    get_owned_listing,
    list_listings,
    update_listing,
)
from wanderlust.utils.auth_gate import forbidden_redirect, login_required
from wanderlust.utils.context import get_request_context
from wanderlust.utils.errors import raise_for_result
from wanderlust.utils.payloads import ListingBody, validate_payload

listings_bp = Blueprint("listings_bp", __name__, url_prefix="/listings")

LISTING_MISSING_MESSAGE = "Listing you requested for does not exist!"


@listings_bp.get("")
def index():
    all_listings = list_listings()
    return render_template("listings/index.html", all_listings=all_listings)


@listings_bp.get("/new")
@login_required
def new():
    return render_template("listings/new.html")


@listings_bp.post("")
@login_required
@validate_payload(ListingBody)
def create(payload: ListingBody):
    ctx = get_request_context()
    raise_for_result(create_listing(ctx, payload.listing))
    ctx.flash("New Listing Created!", "success")
    return redirect(url_for("listings_bp.index"))


@listings_bp.get("/<listing_id>")
def show(listing_id: str):
    ctx = get_request_context()
    found = get_listing(listing_id, with_reviews=True)
    if not found["ok"] and found.get("error") == "NOT_FOUND":
        ctx.flash(LISTING_MISSING_MESSAGE, "error")
        return redirect(url_for("listings_bp.index"))
    raise_for_result(found)
    return render_template("listings/show.html", listing=found["listing"])


@listings_bp.get("/<listing_id>/edit")
@login_required
def edit(listing_id: str):
    ctx = get_request_context()
    found = get_owned_listing(ctx, listing_id)
    if found.get("error") == "FORBIDDEN":
        return forbidden_redirect(ctx, found)
    raise_for_result(found)
    return render_template("listings/edit.html", listing=found["listing"])


@listings_bp.route("/<listing_id>", methods=["PUT", "PATCH"])
@login_required
@validate_payload(ListingBody)
def update(listing_id: str, payload: ListingBody):
    ctx = get_request_context()
    result = update_listing(ctx, listing_id, payload.listing)
    if result.get("error") == "FORBIDDEN":
        return forbidden_redirect(ctx, result)
    raise_for_result(result)
    ctx.flash("Listing Updated!", "success")
    return redirect(url_for("listings_bp.show", listing_id=result["listing"].id))


@listings_bp.delete("/<listing_id>")
@login_required
def destroy(listing_id: str):
    ctx = get_request_context()
    result = delete_listing(ctx, listing_id)
    if result.get("error") == "FORBIDDEN":
        return forbidden_redirect(ctx, result)
    raise_for_result(result)
    ctx.flash("Listing Deleted!", "success")
    return redirect(url_for("listings_bp.index"))
