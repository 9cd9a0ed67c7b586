from sqlalchemy import Boolean, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import AuditMixin, Base, gen_id
from app.models.category import Category
from app.models.enums import ListingType


class Listing(AuditMixin, Base):
    __tablename__ = "listings"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("lst"))

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[str] = mapped_column(String, ForeignKey("categories.id"), nullable=False)

    # Recomputed from the category name by the reconciler, never edited directly
    type: Mapped[ListingType] = mapped_column(
        Enum(ListingType, name="listing_type"), nullable=False, default=ListingType.SPACE
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    category: Mapped[Category] = relationship(lazy="raise")
