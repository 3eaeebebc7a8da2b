from datetime import date
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Time, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class DayOfWeek(str, enum.Enum):
    # Declared in date.weekday() order
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def for_date(cls, day: date) -> "DayOfWeek":
        """Weekday of ``day``, independent of the process locale."""
        return list(cls)[day.weekday()]

    @property
    def position(self) -> int:
        return list(DayOfWeek).index(self)

class DoctorSchedule(Base):
    __tablename__ = "doctor_schedules"
    __table_args__ = (
        UniqueConstraint("doctor_id", "day_of_week", name="uq_doctor_schedule_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(
        SQLEnum(DayOfWeek, name="day_of_week", values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    doctor = relationship("Doctor", back_populates="schedules")

    def covers(self, at) -> bool:
        """True when ``at`` falls inside the window, both bounds inclusive."""
        return self.start_time <= at <= self.end_time

    def __repr__(self):
        return f"<DoctorSchedule(doctor_id={self.doctor_id}, day='{self.day_of_week}', {self.start_time}-{self.end_time})>"
