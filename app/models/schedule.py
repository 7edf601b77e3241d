from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Text, Boolean, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.session import Base

class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    week_start = Column(Date, nullable=False)  # Sunday of the week
    timezone = Column(String, default="UTC")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_schedule_user_week"),
    )

    # Relationships
    items = relationship(
        "ScheduleItem",
        back_populates="schedule",
        cascade="all, delete-orphan",
    )

class ScheduleItem(Base):
    __tablename__ = "schedule_items"

    id = Column(Integer, primary_key=True, index=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id", ondelete="CASCADE"), index=True)
    type = Column(String, default="workout")  # "workout" or "meal"
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    day = Column(Integer, nullable=False)  # 0 = Sunday .. 6 = Saturday
    start_time = Column(String, nullable=False)  # "HH:MM"
    end_time = Column(String, nullable=False)
    category = Column(String, nullable=True)
    difficulty = Column(String, nullable=True)
    duration = Column(Integer, nullable=True)
    calories = Column(Integer, nullable=True)
    is_from_generator = Column(Boolean, default=False)
    generator_data = Column(JSON, nullable=True)

    # Recurrence
    is_recurring = Column(Boolean, default=False)
    repeat_pattern = Column(String, nullable=True)  # "daily", "weekly", "yearly"
    repeat_interval = Column(Integer, nullable=True)
    repeat_ends_on = Column(Date, nullable=True)
    repeat_days_of_week = Column(JSON, nullable=True)
    recurrence_rule = Column(JSON, nullable=True)

    # Relationships
    schedule = relationship("Schedule", back_populates="items")

class ScheduleTemplate(Base):
    __tablename__ = "schedule_templates"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)  # NULL for built-in defaults
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    items = Column(JSON, default=list)
    template_metadata = Column(JSON, nullable=True)
    is_default = Column(Boolean, default=False)
    is_public = Column(Boolean, default=False)
    usage_count = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
