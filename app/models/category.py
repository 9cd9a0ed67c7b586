from sqlalchemy import Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import AuditMixin, Base, gen_id
from app.models.enums import CategoryType


class Category(AuditMixin, Base):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("name", name="uq_category_name"),)

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("cat"))
    name: Mapped[str] = mapped_column(String(120), nullable=False)  # e.g. "Salão de Festas"
    type: Mapped[CategoryType] = mapped_column(
        Enum(CategoryType, name="category_type"), nullable=False, default=CategoryType.SPACE
    )
