"""Weekly availability slot — a time window repeated on a set of weekdays."""

from datetime import datetime, time

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from skillswap.database import Base, utcnow

# Monday is bit 0 (1), Sunday is bit 6 (64).
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
ALL_DAYS = (1 << len(WEEKDAYS)) - 1


def day_bit(day_of_week: int) -> int:
    """Bit for ``day_of_week`` counted from Monday = 1."""
    return 1 << (day_of_week - 1)


def days_in(bitmask: int) -> list:
    return [name for i, name in enumerate(WEEKDAYS) if bitmask & (1 << i)]


class AvailabilitySlot(Base):
    __tablename__ = "availability_slots"
    __table_args__ = (
        CheckConstraint(f"day_bitmask >= 1 AND day_bitmask <= {ALL_DAYS}", name="ck_slot_days"),
        CheckConstraint("end_time > start_time", name="ck_slot_window"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    day_bitmask: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    @property
    def days(self) -> list:
        return days_in(self.day_bitmask)
