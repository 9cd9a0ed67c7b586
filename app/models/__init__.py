from app.models.base import Base  # noqa: F401

from app.models.category import Category  # noqa: F401
from app.models.listing import Listing  # noqa: F401
