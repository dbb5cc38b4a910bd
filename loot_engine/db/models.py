"""SQLAlchemy declarative base and the dropped-item ledger."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON


class Base(DeclarativeBase):
    """Base class for all database models."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DroppedItemModel(Base):
    """생성된 아이템 인스턴스 기록.

    payload는 ItemInstance.to_raw(): 정의는 id로만 저장하고
    조회 시 정의 저장소에서 다시 해석한다.
    """

    __tablename__ = "dropped_items"

    guid: Mapped[str] = mapped_column(String, primary_key=True)
    item_def_id: Mapped[int] = mapped_column(Integer, nullable=False)
    loot_pool_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    owner_type: Mapped[str] = mapped_column(String, nullable=False)  # "world"|"player"|...
    owner_id: Mapped[str] = mapped_column(String, nullable=False)

    rarity: Mapped[str] = mapped_column(String, nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utcnow
    )

    __table_args__ = (Index("idx_drop_owner", "owner_type", "owner_id"),)
