from datetime import datetime

from wanderlust.extensions import db
from wanderlust.utils.keys import new_key

DEFAULT_IMAGE_FILENAME = "listingimage"
DEFAULT_IMAGE_URL = (
    "https://images.unsplash.com/photo-1625505826533-5c80aca7d157"
    "?auto=format&fit=crop&w=800&q=60"
)


class Listing(db.Model):
    __tablename__ = "listings"

    id = db.Column(db.String(32), primary_key=True, default=new_key)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)

    # Image is an embedded {filename, url} pair.
    image_filename = db.Column(db.String(255), nullable=False, default=DEFAULT_IMAGE_FILENAME)
    image_url = db.Column(db.String(1024), nullable=False, default=DEFAULT_IMAGE_URL)

    price = db.Column(db.Float, nullable=True)
    location = db.Column(db.String(200), nullable=True)
    country = db.Column(db.String(120), nullable=True)

    # Set once at creation; there is no endpoint that reassigns it.
    owner_id = db.Column(db.String(32), db.ForeignKey("users.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    owner = db.relationship("User", lazy="joined")
    reviews = db.relationship(
        "Review",
        back_populates="listing",
        order_by="Review.created_at",
        cascade="all, delete-orphan",
        lazy="select",
    )

    @property
    def image(self) -> dict:
        return {
            "filename": self.image_filename or DEFAULT_IMAGE_FILENAME,
            "url": self.image_url or DEFAULT_IMAGE_URL,
        }

    def set_image(self, filename: str | None, url: str | None) -> None:
        url = (url or "").strip()
        if not url:
            return
        self.image_url = url
        self.image_filename = (filename or "").strip() or DEFAULT_IMAGE_FILENAME

    def is_owned_by(self, user) -> bool:
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        return bool(self.owner_id) and self.owner_id == getattr(user, "id", None)
