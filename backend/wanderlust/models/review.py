from datetime import datetime

from wanderlust.extensions import db
from wanderlust.utils.keys import new_key


class Review(db.Model):
    __tablename__ = "reviews"

    id = db.Column(db.String(32), primary_key=True, default=new_key)

    comment = db.Column(db.Text, nullable=False)
    rating = db.Column(db.Integer, nullable=False)

    # A review sits in at most one listing's review list.
    listing_id = db.Column(db.String(32), db.ForeignKey("listings.id"), nullable=True, index=True)
    author_id = db.Column(db.String(32), db.ForeignKey("users.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    listing = db.relationship("Listing", back_populates="reviews")
    author = db.relationship("User", lazy="joined")

    def is_authored_by(self, user) -> bool:
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        return bool(self.author_id) and self.author_id == getattr(user, "id", None)
