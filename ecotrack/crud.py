# ecotrack/crud.py
import logging
import uuid

from passlib.context import CryptContext
from sqlalchemy import and_, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models
from .errors import DuplicateAccount, ProfileNotFound

logger = logging.getLogger(__name__)

pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Auth
def create_user(db: Session, username, email, password):
    clash = (
        db.query(models.User)
        .outerjoin(models.Profile)
        .filter(or_(models.User.email == email, models.Profile.username == username))
        .first()
    )
    if clash:
        raise DuplicateAccount("Email or username already registered")
    user = models.User(email=email, password_hash=pwd_ctx.hash(password), token=uuid.uuid4().hex)
    db.add(user)
    db.flush()
    db.add(models.Profile(id=user.id, username=username, total_points=0))
    db.commit(); db.refresh(user)
    logger.info("Created account %s (%s)", user.id, username)
    return user

def authenticate_user(db: Session, email, password):
    user = get_user_by_email(db, email)
    if not user or not pwd_ctx.verify(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        return None
    # rotate the session token on every login
    user.token = uuid.uuid4().hex
    db.add(user); db.commit(); db.refresh(user)
    return user

def logout_user(db: Session, user):
    user.token = None
    db.add(user); db.commit()

def get_user_by_token(db: Session, token):
    if not token:
        return None
    return db.query(models.User).filter(models.User.token == token).first()

def get_user_by_email(db: Session, email):
    return db.query(models.User).filter(models.User.email == email).first()

# Profiles
def get_profile(db: Session, user_id):
    return db.query(models.Profile).filter(models.Profile.id == user_id).first()

def get_profile_by_username(db: Session, username):
    return db.query(models.Profile).filter(models.Profile.username == username).first()

def update_profile(db: Session, user, username=None, email=None):
    """Apply changed fields only. Returns True when something was written."""
    profile = get_profile(db, user.id)
    if profile is None:
        raise ProfileNotFound(user.id)
    changed = False
    if username and username != profile.username:
        other = get_profile_by_username(db, username)
        if other and other.id != user.id:
            raise DuplicateAccount("Username already taken")
        profile.username = username
        changed = True
    if email and email != user.email:
        other = get_user_by_email(db, email)
        if other and other.id != user.id:
            raise DuplicateAccount("Email already registered")
        user.email = email
        changed = True
    if changed:
        try:
            db.commit()
        except IntegrityError as e:
            # lost a race with another account claiming the same name or email
            db.rollback()
            raise DuplicateAccount("Email or username already registered") from e
        except Exception:
            db.rollback()
            raise
        logger.info("Updated profile %s", user.id)
    return changed

def change_password(db: Session, user, new_password):
    user.password_hash = pwd_ctx.hash(new_password)
    db.add(user); db.commit()

# Activities
def record_activity(db: Session, user_id, fields, result, activity_date=None):
    """
    Insert one activity and add its points to the owner's running total.

    Both writes share a transaction and the increment happens in SQL, so
    concurrent submissions cannot overwrite each other's points.
    """
    act = models.Activity(
        user_id=user_id,
        carbon_kg=result.carbon_kg,
        points_earned=result.points_earned,
        **fields,
    )
    if activity_date is not None:
        act.activity_date = activity_date
    try:
        db.add(act)
        db.flush()
        updated = db.execute(
            update(models.Profile)
            .where(models.Profile.id == user_id)
            .values(total_points=models.Profile.total_points + result.points_earned)
            .execution_options(synchronize_session="fetch")
        ).rowcount
        if updated != 1:
            raise ProfileNotFound(user_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(act)
    logger.info("Recorded %s activity %s for %s: %.3f kg, %d pts",
                act.activity_type, act.id, user_id, act.carbon_kg, act.points_earned)
    return act

def get_activities_since(db: Session, user_id, start_date):
    return (
        db.query(models.Activity)
        .filter(models.Activity.user_id == user_id, models.Activity.activity_date >= start_date)
        .order_by(models.Activity.activity_date.asc(), models.Activity.created_at.asc())
        .all()
    )

def get_total_carbon(db: Session, user_id):
    total = db.query(func.sum(models.Activity.carbon_kg)).filter(models.Activity.user_id == user_id).scalar()
    return float(total or 0.0)

def activity_to_dict(a):
    return {
        "id": a.id,
        "activity_type": a.activity_type,
        "transportation_mode": a.transportation_mode,
        "distance_km": a.distance_km,
        "energy_kwh": a.energy_kwh,
        "diet_type": a.diet_type,
        "carbon_kg": a.carbon_kg,
        "points_earned": a.points_earned,
        "activity_date": a.activity_date.isoformat(),
        "created_at": a.created_at.isoformat() if a.created_at else None,
    }

# Leaderboard
def leaderboard(db: Session, limit=10):
    return (
        db.query(models.Profile)
        .order_by(models.Profile.total_points.desc(), models.Profile.created_at.asc(), models.Profile.id.asc())
        .limit(limit)
        .all()
    )

def get_rank(db: Session, user_id):
    """Position of the user in the full leaderboard ordering, starting at 1."""
    profile = get_profile(db, user_id)
    if profile is None:
        return None
    P = models.Profile
    same_points = P.total_points == profile.total_points
    ahead = (
        db.query(func.count(P.id))
        .filter(or_(
            P.total_points > profile.total_points,
            and_(same_points, P.created_at < profile.created_at),
            and_(same_points, P.created_at == profile.created_at, P.id < profile.id),
        ))
        .scalar()
    )
    return ahead + 1
