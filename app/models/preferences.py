from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, JSON
from sqlalchemy.orm import relationship
from app.db.session import Base

class Preferences(Base):
    __tablename__ = "preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True)

    # Schedule cadence
    days_per_week = Column(Integer, nullable=True)
    preferred_days = Column(JSON, default=list)  # weekday indexes, 0 = Sunday
    preferred_time = Column(String, nullable=True)  # "HH:MM"
    repeat_interval_weeks = Column(Integer, nullable=True)
    timezone = Column(String, nullable=True)

    # Workout preferences
    difficulty = Column(String, nullable=True)
    focus_areas = Column(JSON, default=list)
    available_equipment = Column(JSON, default=list)
    include_cardio = Column(Boolean, nullable=True)

    # Relationship
    user = relationship("User", backref="preferences")
