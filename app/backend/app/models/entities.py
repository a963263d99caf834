"""ORM entities for the resource planning schema."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class ClientCurrency(str, enum.Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"

    @property
    def symbol(self) -> str:
        return {"USD": "$", "EUR": "€", "GBP": "£"}[self.value]


class RateCardRegion(str, enum.Enum):
    """Region columns of a rate card."""

    UKRAINE = "ukraine"
    EASTERN_EUROPE = "eastern_europe"
    ASIA_GE = "asia_ge"
    ASIA_ARM_KZ = "asia_arm_kz"
    LATAM = "latam"
    MEXICO = "mexico"
    INDIA = "india"
    NEW_YORK = "new_york"
    LONDON = "london"


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("exchange_rate > 0", name="ck_projects_exchange_rate_positive"),
        CheckConstraint(
            "default_margin >= 0 AND default_margin < 100",
            name="ck_projects_default_margin_range",
        ),
        CheckConstraint("week_count >= 1", name="ck_projects_week_count_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    days_in_fte: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    client_currency: Mapped[ClientCurrency] = mapped_column(
        SQLEnum(
            ClientCurrency,
            name="client_currency",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=ClientCurrency.EUR,
    )
    exchange_rate: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    default_margin: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    week_count: Mapped[int] = mapped_column(Integer, nullable=False, default=8)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class RateCard(Base):
    __tablename__ = "rate_cards"
    __table_args__ = (Index("ix_rate_cards_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    naming_in_pm: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    discipline: Mapped[str] = mapped_column(String(255), nullable=False, default="General")
    description: Mapped[str] = mapped_column(String(2000), nullable=False, default="")
    ukraine: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    eastern_europe: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    asia_ge: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    asia_arm_kz: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    latam: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    mexico: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    india: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    new_york: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    london: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class ResourceList(Base):
    __tablename__ = "resource_lists"
    __table_args__ = (
        CheckConstraint("int_rate >= 0", name="ck_resource_lists_int_rate_non_negative"),
        Index("ix_resource_lists_project_id", "project_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    client_role: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    int_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class ResourcePlan(Base):
    __tablename__ = "resource_plans"
    __table_args__ = (
        CheckConstraint("int_hourly_rate >= 0", name="ck_resource_plans_int_rate_non_negative"),
        CheckConstraint("client_hourly_rate >= 0", name="ck_resource_plans_client_rate_non_negative"),
        Index("ix_resource_plans_project_id", "project_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    client_role: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    int_hourly_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    client_hourly_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    sequence_no: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class WeeklyAllocation(Base):
    __tablename__ = "weekly_allocations"
    __table_args__ = (
        CheckConstraint("week_number >= 1", name="ck_weekly_allocations_week_number_positive"),
        CheckConstraint(
            "allocation >= 0 AND allocation <= 100",
            name="ck_weekly_allocations_allocation_range",
        ),
        UniqueConstraint("resource_plan_id", "week_number", name="uq_weekly_allocations_plan_week"),
        Index("ix_weekly_allocations_resource_plan_id", "resource_plan_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    resource_plan_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("resource_plans.id", ondelete="CASCADE"), nullable=False
    )
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    allocation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
