# ecotrack/dashboard.py
from collections import defaultdict
from datetime import date, timedelta

from .calculator import carbon_by_type

RANGE_DAYS = {"week": 7, "month": 30}
RECOMMENDATION_WINDOW_DAYS = 30


def start_date_for(days, today=None):
    today = today or date.today()
    return today - timedelta(days=days)


def summarize(activities, days):
    """Aggregate activity dicts into the figures shown on the dashboard."""
    total = sum(float(a.get("carbon_kg") or 0) for a in activities)
    daily = defaultdict(float)
    for a in activities:
        daily[a["activity_date"]] += float(a.get("carbon_kg") or 0)
    return {
        "days": days,
        "total_carbon": round(total, 4),
        "avg_daily": round(total / days, 4) if activities else 0.0,
        "by_type": {k: round(v, 4) for k, v in carbon_by_type(activities).items()},
        "daily": [{"date": d, "carbon_kg": round(daily[d], 4)} for d in sorted(daily)],
        "activity_count": len(activities),
        "points": sum(int(a.get("points_earned") or 0) for a in activities),
    }
