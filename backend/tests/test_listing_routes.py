from __future__ import annotations

import unittest
from unittest.mock import patch

from wanderlust.extensions import db
from wanderlust.models import DEFAULT_IMAGE_URL, Listing, Review
from wanderlust.utils.keys import new_key

from tests.support import WanderlustTestCase, listing_form, location_path


class ListingRoutesTestCase(WanderlustTestCase):
    def setUp(self):
        super().setUp()
        self.signup("owner")

    def test_root_redirects_to_index(self):
        res = self.client.get("/")
        self.assertEqual(res.status_code, 302)
        self.assertEqual(location_path(res), "/listings")

    def test_create_then_index_shows_listing_once(self):
        res = self.client.post("/listings", data=listing_form(title="Treehouse Retreat"))
        self.assertEqual(res.status_code, 302)
        self.assertEqual(location_path(res), "/listings")
        self.assertIn(("success", "New Listing Created!"), self.flashes())

        page = self.client.get("/listings")
        self.assertEqual(page.status_code, 200)
        self.assertEqual(page.get_data(as_text=True).count("Treehouse Retreat"), 1)

    def test_created_listing_is_owned_by_current_user(self):
        listing_id = self.create_listing()
        with self.app.app_context():
            listing = db.session.get(Listing, listing_id)
            self.assertEqual(listing.owner_id, self.user_id("owner"))
            self.assertEqual(listing.image["url"], "https://example.com/cottage.jpg")
            self.assertEqual(listing.price, 1500.0)

    def test_blank_image_falls_back_to_default(self):
        listing_id = self.create_listing(image_url="")
        with self.app.app_context():
            listing = db.session.get(Listing, listing_id)
            self.assertEqual(listing.image["url"], DEFAULT_IMAGE_URL)

    def test_create_rejects_invalid_payload_with_all_messages(self):
        res = self.client.post("/listings", data=listing_form(title="", price="-5"))
        self.assertEqual(res.status_code, 400)
        body = res.get_data(as_text=True)
        self.assertIn("listing.title", body)
        self.assertIn("listing.price", body)
        with self.app.app_context():
            self.assertEqual(Listing.query.count(), 0)

    def test_create_rejects_non_finite_price(self):
        res = self.client.post("/listings", data=listing_form(price="inf"))
        self.assertEqual(res.status_code, 400)
        self.assertIn("must be a finite number", res.get_data(as_text=True))
        with self.app.app_context():
            self.assertEqual(Listing.query.count(), 0)

    def test_create_rejects_missing_listing_object(self):
        res = self.client.post("/listings", data={"title": "flat"})
        self.assertEqual(res.status_code, 400)
        self.assertIn("&#34;listing&#34; is required", res.get_data(as_text=True))

    def test_create_accepts_json_body(self):
        res = self.client.post(
            "/listings",
            json={
                "listing": {
                    "title": "Json Loft",
                    "description": "Loft",
                    "price": 99,
                    "location": "Berlin",
                    "country": "Germany",
                }
            },
        )
        self.assertEqual(res.status_code, 302)
        with self.app.app_context():
            self.assertEqual(Listing.query.filter_by(title="Json Loft").count(), 1)

    def test_show_renders_listing(self):
        listing_id = self.create_listing(title="Mountain Cabin")
        res = self.client.get(f"/listings/{listing_id}")
        self.assertEqual(res.status_code, 200)
        body = res.get_data(as_text=True)
        self.assertIn("Mountain Cabin", body)
        self.assertIn("Owned by owner", body)

    def test_show_trims_identifier(self):
        listing_id = self.create_listing()
        res = self.client.get(f"/listings/%20{listing_id}%20")
        self.assertEqual(res.status_code, 200)

    def test_show_invalid_identifier_is_400_without_db_call(self):
        with patch("wanderlust.services.listing_service.Listing") as listing_model:
            for bad in ("not-a-key", "123", "z" * 32, new_key() + "0"):
                res = self.client.get(f"/listings/{bad}")
                self.assertEqual(res.status_code, 400, bad)
                self.assertIn("Invalid ID format", res.get_data(as_text=True))
            listing_model.query.filter.assert_not_called()
            listing_model.query.options.assert_not_called()

    def test_show_missing_listing_redirects_only(self):
        res = self.client.get(f"/listings/{new_key()}")
        self.assertEqual(res.status_code, 302)
        self.assertEqual(location_path(res), "/listings")
        self.assertIn(("error", "Listing you requested for does not exist!"), self.flashes())

    def test_edit_update_delete_missing_listing_is_404(self):
        missing = new_key()
        self.assertEqual(self.client.get(f"/listings/{missing}/edit").status_code, 404)
        self.assertEqual(self.client.put(f"/listings/{missing}", data=listing_form()).status_code, 404)
        self.assertEqual(self.client.delete(f"/listings/{missing}").status_code, 404)

    def test_edit_renders_form_for_owner(self):
        listing_id = self.create_listing(title="Lake House")
        res = self.client.get(f"/listings/{listing_id}/edit")
        self.assertEqual(res.status_code, 200)
        self.assertIn('value="Lake House"', res.get_data(as_text=True))

    def test_update_via_method_override(self):
        listing_id = self.create_listing()
        res = self.client.post(
            f"/listings/{listing_id}?_method=PUT",
            data=listing_form(title="Renamed Cottage", price="2000", image_url=""),
        )
        self.assertEqual(res.status_code, 302)
        self.assertEqual(location_path(res), f"/listings/{listing_id}")
        self.assertIn(("success", "Listing Updated!"), self.flashes())
        with self.app.app_context():
            listing = db.session.get(Listing, listing_id)
            self.assertEqual(listing.title, "Renamed Cottage")
            self.assertEqual(listing.price, 2000.0)
            # No new image submitted: keep the old one.
            self.assertEqual(listing.image["url"], "https://example.com/cottage.jpg")

    def test_delete_removes_listing_and_its_reviews(self):
        listing_id = self.create_listing()
        self.create_review(listing_id)
        res = self.client.post(f"/listings/{listing_id}?_method=DELETE")
        self.assertEqual(res.status_code, 302)
        self.assertEqual(location_path(res), "/listings")
        self.assertIn(("success", "Listing Deleted!"), self.flashes())
        with self.app.app_context():
            self.assertIsNone(db.session.get(Listing, listing_id))
            self.assertEqual(Review.query.count(), 0)

    def test_non_owner_cannot_edit_update_or_delete(self):
        listing_id = self.create_listing(title="Owner Only")
        other = self.app.test_client()
        self.signup("intruder", client=other)

        for res in (
            other.get(f"/listings/{listing_id}/edit"),
            other.put(f"/listings/{listing_id}", data=listing_form(title="Hijacked")),
            other.delete(f"/listings/{listing_id}"),
        ):
            self.assertEqual(res.status_code, 302)
            self.assertEqual(location_path(res), f"/listings/{listing_id}")
        self.assertIn(("error", "You are not the owner of this listing!"), self.flashes(client=other))
        with self.app.app_context():
            listing = db.session.get(Listing, listing_id)
            self.assertIsNotNone(listing)
            self.assertEqual(listing.title, "Owner Only")

    def test_update_cannot_reassign_owner(self):
        listing_id = self.create_listing()
        owner_id = self.user_id("owner")
        form = listing_form(title="Still Mine")
        form["listing[owner_id]"] = new_key()
        form["listing[owner]"] = new_key()
        res = self.client.post(f"/listings/{listing_id}?_method=PUT", data=form)
        self.assertEqual(res.status_code, 302)
        with self.app.app_context():
            listing = db.session.get(Listing, listing_id)
            self.assertEqual(listing.title, "Still Mine")
            self.assertEqual(listing.owner_id, owner_id)

    def test_malformed_identifier_on_mutations_is_400(self):
        self.assertEqual(self.client.get("/listings/bad-id/edit").status_code, 400)
        self.assertEqual(self.client.delete("/listings/bad-id").status_code, 400)


class ListingAuthGateTestCase(WanderlustTestCase):
    def test_new_form_redirects_to_login_when_anonymous(self):
        with patch("wanderlust.segments.segment_listings.render_template") as render:
            res = self.client.get("/listings/new")
            render.assert_not_called()
        self.assertEqual(res.status_code, 302)
        self.assertEqual(location_path(res), "/login")
        self.assertIn(("error", "You must be logged in to do that!"), self.flashes())

    def test_edit_form_redirects_to_login_when_anonymous(self):
        with patch("wanderlust.segments.segment_listings.get_owned_listing") as handler:
            res = self.client.get(f"/listings/{new_key()}/edit")
            handler.assert_not_called()
        self.assertEqual(res.status_code, 302)
        self.assertEqual(location_path(res), "/login")

    def test_anonymous_create_is_rejected(self):
        res = self.client.post("/listings", data=listing_form())
        self.assertEqual(res.status_code, 302)
        self.assertEqual(location_path(res), "/login")
        with self.app.app_context():
            self.assertEqual(Listing.query.count(), 0)

    def test_anonymous_update_and_delete_are_rejected(self):
        owner = self.app.test_client()
        self.signup("owner", client=owner)
        listing_id = self.create_listing(client=owner, title="Guarded Cabin")

        with patch("wanderlust.segments.segment_listings.update_listing") as update, patch(
            "wanderlust.segments.segment_listings.delete_listing"
        ) as delete:
            for res in (
                self.client.put(f"/listings/{listing_id}", data=listing_form(title="Defaced")),
                self.client.post(f"/listings/{listing_id}?_method=DELETE"),
            ):
                self.assertEqual(res.status_code, 302)
                self.assertEqual(location_path(res), "/login")
            update.assert_not_called()
            delete.assert_not_called()
        self.assertIn(("error", "You must be logged in to do that!"), self.flashes())
        with self.app.app_context():
            listing = db.session.get(Listing, listing_id)
            self.assertIsNotNone(listing)
            self.assertEqual(listing.title, "Guarded Cabin")

    def test_index_is_public(self):
        res = self.client.get("/listings")
        self.assertEqual(res.status_code, 200)
        self.assertIn("All Listings", res.get_data(as_text=True))


if __name__ == "__main__":
    unittest.main()
