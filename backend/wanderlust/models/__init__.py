from wanderlust.models.user import User
from wanderlust.models.listing import Listing, DEFAULT_IMAGE_FILENAME, DEFAULT_IMAGE_URL
from wanderlust.models.review import Review

__all__ = [
    "User",
    "Listing",
    "Review",
    "DEFAULT_IMAGE_FILENAME",
    "DEFAULT_IMAGE_URL",
]
