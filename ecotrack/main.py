# ecotrack/main.py
import logging
from datetime import date
from typing import Optional

from fastapi import FastAPI, Depends, Form, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlalchemy.orm import Session

from . import calculator, config, crud, dashboard, schemas, share, weather
from .database import Base, SessionLocal, engine
from .errors import DuplicateAccount, InvalidActivityInput, ProfileNotFound, WeatherUnavailable

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

# Create DB tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="EcoTrack Carbon Footprint API")
app.add_middleware(CORSMiddleware, allow_origins=config.CORS_ORIGINS, allow_methods=["*"], allow_headers=["*"])

# Dependency to get DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def current_user(db: Session, token):
    user = crud.get_user_by_token(db, token)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user

def token_payload(user):
    return {
        "token": user.token,
        "user_id": user.id,
        "username": user.profile.username,
        "email": user.email,
        "total_points": user.profile.total_points,
    }

@app.get("/")
def root():
    return {"message": "EcoTrack API running"}

# -----------------
# Auth endpoints
# -----------------
@app.post("/signup", response_model=schemas.TokenOut)
def signup(payload: schemas.SignupIn, db: Session = Depends(get_db)):
    try:
        user = crud.create_user(db, payload.username, payload.email, payload.password)
    except DuplicateAccount as e:
        raise HTTPException(status_code=400, detail=str(e))
    return token_payload(user)

@app.post("/login", response_model=schemas.TokenOut)
def login(payload: schemas.LoginIn, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return token_payload(user)

@app.post("/logout")
def logout(token: str = Form(...), db: Session = Depends(get_db)):
    user = current_user(db, token)
    crud.logout_user(db, user)
    return {"ok": True}

# -----------------
# Activities
# -----------------
@app.post("/activities", response_model=schemas.ActivityOut)
def add_activity(
    token: str = Form(...),
    activity_type: str = Form(...),
    transportation_mode: Optional[str] = Form(None),
    distance_km: Optional[str] = Form(None),
    energy_kwh: Optional[str] = Form(None),
    diet_type: Optional[str] = Form(None),
    activity_date: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    """
    Log one activity. Carbon and points are always computed here; any
    derived values a client might send are not accepted.
    """
    user = current_user(db, token)
    try:
        fields, result = calculator.calculate_activity(
            activity_type,
            transportation_mode=transportation_mode,
            distance_km=distance_km,
            energy_kwh=energy_kwh,
            diet_type=diet_type,
        )
        when = date.fromisoformat(activity_date) if activity_date else None
    except InvalidActivityInput as e:
        logger.warning("Rejected activity from %s: %s", user.id, e)
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError:
        raise HTTPException(status_code=400, detail="activity_date must be YYYY-MM-DD")

    try:
        act = crud.record_activity(db, user.id, fields, result, activity_date=when)
    except ProfileNotFound:
        raise HTTPException(status_code=404, detail="Profile not found")
    except Exception:
        logger.exception("Failed to record activity for %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to log activity")
    return crud.activity_to_dict(act)

@app.get("/activities")
def list_activities(token: str, days: int = Query(30, ge=1, le=3650), db: Session = Depends(get_db)):
    user = current_user(db, token)
    rows = crud.get_activities_since(db, user.id, dashboard.start_date_for(days))
    return [crud.activity_to_dict(r) for r in rows]

# -----------------
# Dashboard & recommendations
# -----------------
@app.get("/dashboard")
def get_dashboard(token: str, range_: str = Query("week", alias="range", pattern="^(week|month)$"), db: Session = Depends(get_db)):
    user = current_user(db, token)
    days = dashboard.RANGE_DAYS[range_]
    rows = crud.get_activities_since(db, user.id, dashboard.start_date_for(days))
    summary = dashboard.summarize([crud.activity_to_dict(r) for r in rows], days)
    summary["range"] = range_
    summary["total_points"] = user.profile.total_points
    return summary

@app.get("/recommendations", response_model=schemas.RecommendationsOut)
def get_recommendations(token: str, db: Session = Depends(get_db)):
    user = current_user(db, token)
    since = dashboard.start_date_for(dashboard.RECOMMENDATION_WINDOW_DAYS)
    acts = [crud.activity_to_dict(r) for r in crud.get_activities_since(db, user.id, since)]
    total = sum(a["carbon_kg"] for a in acts)
    return {"total_carbon": round(total, 4), "recommendations": calculator.get_recommendations(acts, total)}

@app.get("/weather", response_model=schemas.WeatherOut)
def get_weather():
    try:
        current = weather.fetch_current_weather()
    except WeatherUnavailable:
        raise HTTPException(status_code=502, detail="Weather service unavailable")
    current["advice"] = weather.weather_advice(current["temperature"], current["weather_code"])
    return current

# -----------------
# Leaderboard
# -----------------
@app.get("/leaderboard", response_model=schemas.LeaderboardOut)
def get_leaderboard(token: Optional[str] = None, limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    top = [
        {"rank": i + 1, "user_id": p.id, "username": p.username,
         "total_points": p.total_points, "created_at": p.created_at.isoformat()}
        for i, p in enumerate(crud.leaderboard(db, limit))
    ]
    your_rank = None
    if token:
        user = current_user(db, token)
        your_rank = crud.get_rank(db, user.id)
    return {"top": top, "your_rank": your_rank}

# -----------------
# Profile
# -----------------
def profile_payload(db, user):
    p = user.profile
    return {
        "user_id": user.id,
        "username": p.username,
        "email": user.email,
        "total_points": p.total_points,
        "total_carbon": round(crud.get_total_carbon(db, user.id), 4),
        "rank": crud.get_rank(db, user.id),
        "created_at": p.created_at.isoformat(),
    }

@app.get("/profile", response_model=schemas.ProfileOut)
def read_profile(token: str, db: Session = Depends(get_db)):
    user = current_user(db, token)
    return profile_payload(db, user)

@app.put("/profile")
def edit_profile(payload: schemas.ProfileUpdateIn, token: str, db: Session = Depends(get_db)):
    user = current_user(db, token)
    try:
        changed = crud.update_profile(db, user, username=payload.username, email=payload.email)
    except DuplicateAccount as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProfileNotFound:
        raise HTTPException(status_code=404, detail="Profile not found")
    db.refresh(user)
    return {"changed": changed, "profile": profile_payload(db, user)}

@app.post("/profile/password")
def edit_password(payload: schemas.PasswordChangeIn, token: str, db: Session = Depends(get_db)):
    user = current_user(db, token)
    crud.change_password(db, user, payload.new_password)
    return {"ok": True}

# -----------------
# Sharing
# -----------------
@app.get("/share", response_model=schemas.ShareOut)
def get_share(token: str, db: Session = Depends(get_db)):
    user = current_user(db, token)
    points = user.profile.total_points
    carbon = crud.get_total_carbon(db, user.id)
    return {"text": share.share_text(points, carbon), "links": share.share_links(points, carbon, config.SHARE_URL)}

@app.get("/share/card.png")
def get_share_card(token: str, db: Session = Depends(get_db)):
    user = current_user(db, token)
    points = user.profile.total_points
    png = share.render_share_card(user.profile.username, points, crud.get_total_carbon(db, user.id))
    headers = {"Content-Disposition": f'attachment; filename="EcoTrack_Achievement_{points}pts.png"'}
    return Response(content=png, media_type="image/png", headers=headers)
