from __future__ import annotations

import os
import unittest
from unittest.mock import patch
from urllib.parse import urlsplit

from wanderlust import create_app
from wanderlust.extensions import db
from wanderlust.models import Listing, Review, User

MEMORY_DB = "sqlite:///:memory:"


def listing_form(**overrides) -> dict:
    image_url = overrides.pop("image_url", "https://example.com/cottage.jpg")
    fields = {
        "title": "Cozy Beachfront Cottage",
        "description": "Escape to this charming beachfront cottage.",
        "price": "1500",
        "location": "Malibu",
        "country": "United States",
    }
    fields.update(overrides)
    form = {f"listing[{key}]": value for key, value in fields.items() if value is not None}
    if image_url is not None:
        form["listing[image][url]"] = image_url
    return form


def location_path(response) -> str:
    return urlsplit(response.headers.get("Location") or "").path


class WanderlustTestCase(unittest.TestCase):
    """Fresh app and in-memory database per test."""

    def setUp(self):
        self._env = patch.dict(
            os.environ,
            {
                "SQLALCHEMY_DATABASE_URI": MEMORY_DB,
                "DATABASE_URL": MEMORY_DB,
                "WANDERLUST_ENV": "test",
                "SECRET_KEY": "wanderlust-test-secret",
                "SENTRY_DSN": "",
                "AUTO_CREATE_TABLES": "1",
            },
            clear=False,
        )
        self._env.start()
        self.app = create_app()
        self.app.config.update(TESTING=True)
        self.client = self.app.test_client()

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()
        self._env.stop()

    # -- auth helpers

    def signup(self, username: str = "wanderer", password: str = "s3cret-pass", email: str | None = None, client=None):
        client = client or self.client
        return client.post(
            "/signup",
            data={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )

    def login(self, username: str = "wanderer", password: str = "s3cret-pass", client=None):
        client = client or self.client
        return client.post("/login", data={"username": username, "password": password})

    def logout(self, client=None):
        client = client or self.client
        return client.get("/logout")

    def flashes(self, client=None) -> list[tuple[str, str]]:
        client = client or self.client
        with client.session_transaction() as sess:
            return list(sess.get("_flashes") or [])

    # -- data helpers

    def create_listing(self, client=None, **overrides) -> str:
        client = client or self.client
        title = overrides.get("title") or "Cozy Beachfront Cottage"
        res = client.post("/listings", data=listing_form(**overrides))
        self.assertEqual(res.status_code, 302, res.get_data(as_text=True))
        with self.app.app_context():
            listing = (
                Listing.query.filter(Listing.title == title)
                .order_by(Listing.created_at.desc())
                .first()
            )
            self.assertIsNotNone(listing)
            return listing.id

    def create_review(self, listing_id: str, comment: str = "Lovely stay", rating: int = 5, client=None) -> str:
        client = client or self.client
        res = client.post(
            f"/listings/{listing_id}/reviews",
            data={"review[comment]": comment, "review[rating]": str(rating)},
        )
        self.assertEqual(res.status_code, 302, res.get_data(as_text=True))
        with self.app.app_context():
            review = Review.query.filter(Review.comment == comment).order_by(Review.created_at.desc()).first()
            self.assertIsNotNone(review)
            return review.id

    def review_ids(self, listing_id: str) -> list[str]:
        with self.app.app_context():
            listing = db.session.get(Listing, listing_id)
            return [r.id for r in listing.reviews] if listing else []

    def user_id(self, username: str) -> str | None:
        with self.app.app_context():
            user = User.query.filter_by(username=username).first()
            return user.id if user else None
