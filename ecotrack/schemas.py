# ecotrack/schemas.py
from pydantic import BaseModel, EmailStr, Field, StringConstraints, model_validator
from typing import Annotated, Optional, List, Dict

Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]

class SignupIn(BaseModel):
    username: Username
    email: EmailStr
    password: str = Field(..., min_length=6)

class LoginIn(BaseModel):
    email: EmailStr
    password: str

class TokenOut(BaseModel):
    token: str
    user_id: str
    username: str
    email: EmailStr
    total_points: int

class ProfileOut(BaseModel):
    user_id: str
    username: str
    email: EmailStr
    total_points: int
    total_carbon: float
    rank: Optional[int] = None
    created_at: str

class ProfileUpdateIn(BaseModel):
    username: Optional[Username] = None
    email: Optional[EmailStr] = None

class PasswordChangeIn(BaseModel):
    new_password: str
    confirm_password: str

    @model_validator(mode="after")
    def check_passwords(self):
        if self.new_password != self.confirm_password:
            raise ValueError("New passwords do not match")
        if len(self.new_password) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return self

class ActivityOut(BaseModel):
    id: str
    activity_type: str
    transportation_mode: Optional[str] = None
    distance_km: Optional[float] = None
    energy_kwh: Optional[float] = None
    diet_type: Optional[str] = None
    carbon_kg: float
    points_earned: int
    activity_date: str
    created_at: Optional[str] = None

class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    username: str
    total_points: int
    created_at: str

class LeaderboardOut(BaseModel):
    top: List[LeaderboardEntry]
    your_rank: Optional[int] = None

class RecommendationsOut(BaseModel):
    total_carbon: float
    recommendations: List[str]

class WeatherOut(BaseModel):
    temperature: float
    weather_code: int
    advice: str

class ShareOut(BaseModel):
    text: str
    links: Dict[str, str]
