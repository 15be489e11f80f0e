"""
Products API - Product SQLAlchemy Model
=======================================

What:  ORM model for the ``products`` table, the only entity of the API.
Who:   Queried and mutated by ProductService; created by Database.connect()
       and recreated by the ``--clear`` command.

Columns:
    id            Integer primary key, assigned by the database, never updated
    name          Product name (non-empty is a request rule, not a DB constraint)
    price         Float; ``price > 0`` is only enforced by request validation
    availability  Defaults to True on insert; flipped by PATCH
    createdAt     Insert timestamp (UTC)
    updatedAt     Insert/update timestamp (UTC)

Timestamp columns keep the camelCase names used by the API payloads; the
Python attributes are snake_case.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from products_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """
    A product row.

    Defaults are Python-side so that values are known on the instance right
    after flush (no lazy refresh needed under AsyncSession).
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    price: Mapped[float] = mapped_column(Float, nullable=False)

    availability: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt",
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return (
            f"<Product(id={self.id}, name='{self.name}', price={self.price}, "
            f"availability={self.availability})>"
        )
