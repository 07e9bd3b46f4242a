"""
slambase_admin.db.models

Persistence schema for the roster database.

Responsibilities:
- Define ORM models mirroring the platform tables:
  - AdminUser: admin membership + role (the only authorization signal)
  - Promotion, Wrestler, Championship, Event, Feud, FeudParticipant: roster content
- Define the closed enums backing the tables' CHECK constraints.
"""

from __future__ import annotations

import enum
from datetime import UTC, date, datetime

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from slambase_admin.auth.models import AdminRole
from slambase_admin.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _enum(cls: type[enum.Enum]) -> Enum:
    # VARCHAR + CHECK rather than a native type, matching the platform schema.
    return Enum(
        cls,
        name=cls.__name__.lower(),
        native_enum=False,
        create_constraint=True,
        length=32,
        values_callable=lambda e: [m.value for m in e],
    )


class WrestlerStatus(enum.StrEnum):
    active = "active"
    retired = "retired"
    released = "released"
    injured = "injured"


class ChampionshipTier(enum.StrEnum):
    world = "world"
    secondary = "secondary"
    tag = "tag"
    women = "women"
    cruiserweight = "cruiserweight"
    midcard = "midcard"


class EventType(enum.StrEnum):
    ppv = "ppv"
    tv = "tv"
    house_show = "house_show"
    special = "special"


class FeudStatus(enum.StrEnum):
    active = "active"
    ended = "ended"


class FeudRole(enum.StrEnum):
    face = "face"
    heel = "heel"
    neutral = "neutral"


class AdminUser(Base):
    __tablename__ = "admin_users"

    # Same id as the platform auth user; one row per identity.
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    role: Mapped[AdminRole] = mapped_column(_enum(AdminRole), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Promotion(Base):
    __tablename__ = "promotions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    abbreviation: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Wrestler(Base):
    __tablename__ = "wrestlers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    ring_name: Mapped[str | None] = mapped_column(String(200), nullable=True, index=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    birthplace: Mapped[str | None] = mapped_column(String(200), nullable=True)
    height: Mapped[str | None] = mapped_column(String(32), nullable=True)
    weight: Mapped[str | None] = mapped_column(String(32), nullable=True)
    finishing_move: Mapped[str | None] = mapped_column(String(200), nullable=True)
    signature_move: Mapped[str | None] = mapped_column(String(200), nullable=True)
    debut_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    promotion_id: Mapped[int | None] = mapped_column(
        ForeignKey("promotions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    brand: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[WrestlerStatus] = mapped_column(
        _enum(WrestlerStatus), nullable=False, default=WrestlerStatus.active, index=True
    )
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    promotion: Mapped[Promotion | None] = relationship(lazy="selectin")

    @property
    def display_name(self) -> str:
        return self.ring_name or self.name


class Championship(Base):
    __tablename__ = "championships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    promotion_id: Mapped[int | None] = mapped_column(
        ForeignKey("promotions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    tier: Mapped[ChampionshipTier] = mapped_column(_enum(ChampionshipTier), nullable=False)
    current_champion_id: Mapped[int | None] = mapped_column(
        ForeignKey("wrestlers.id", ondelete="SET NULL"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    event_type: Mapped[EventType] = mapped_column(_enum(EventType), nullable=False)
    venue: Mapped[str | None] = mapped_column(String(200), nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    promotion_id: Mapped[int | None] = mapped_column(
        ForeignKey("promotions.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


class Feud(Base):
    __tablename__ = "feuds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[FeudStatus] = mapped_column(
        _enum(FeudStatus), nullable=False, default=FeudStatus.active
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    promotion_id: Mapped[int | None] = mapped_column(
        ForeignKey("promotions.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    participants: Mapped[list[FeudParticipant]] = relationship(
        back_populates="feud", cascade="all, delete-orphan", lazy="selectin"
    )


class FeudParticipant(Base):
    __tablename__ = "feud_participants"

    feud_id: Mapped[int] = mapped_column(
        ForeignKey("feuds.id", ondelete="CASCADE"), primary_key=True
    )
    wrestler_id: Mapped[int] = mapped_column(
        ForeignKey("wrestlers.id", ondelete="CASCADE"), primary_key=True
    )
    role: Mapped[FeudRole] = mapped_column(
        _enum(FeudRole), nullable=False, default=FeudRole.neutral
    )

    feud: Mapped[Feud] = relationship(back_populates="participants")


# --- Module Notes -----------------------------------------------------------
# The platform owns these tables; this module mirrors them for querying and for
# dev/test bootstrapping. Uniqueness and FK integrity are enforced by the DB.
