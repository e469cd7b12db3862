# ecotrack/models.py
from sqlalchemy import Column, String, Integer, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import date, datetime
from .database import Base
import uuid

def gen_id(prefix):
    return f"{prefix}_{uuid.uuid4().hex[:8]}"

class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: gen_id("user"))
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    token = Column(String, nullable=True, index=True)  # opaque session token
    created_at = Column(DateTime, default=datetime.utcnow)

    profile = relationship("Profile", back_populates="user", uselist=False)
    activities = relationship("Activity", back_populates="user")

class Profile(Base):
    __tablename__ = "profiles"
    id = Column(String, ForeignKey("users.id"), primary_key=True)
    username = Column(String, unique=True, nullable=False)
    total_points = Column(Integer, nullable=False, default=0)  # only ever incremented
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="profile")

class Activity(Base):
    __tablename__ = "activities"
    id = Column(String, primary_key=True, default=lambda: gen_id("act"))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    activity_type = Column(String, nullable=False)  # transportation | energy | food
    transportation_mode = Column(String, nullable=True)
    distance_km = Column(Float, nullable=True)
    energy_kwh = Column(Float, nullable=True)
    diet_type = Column(String, nullable=True)
    carbon_kg = Column(Float, nullable=False, default=0.0)
    points_earned = Column(Integer, nullable=False, default=0)
    activity_date = Column(Date, nullable=False, default=date.today, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="activities")
