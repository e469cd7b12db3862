from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from ecotrack import crud, weather
from ecotrack.errors import WeatherUnavailable


def log(client, token, **fields):
    return client.post("/activities", data={"token": token, **fields})


def test_signup_and_login(client, signup):
    account = signup("asha")
    assert account["username"] == "asha"
    assert account["total_points"] == 0

    resp = client.post("/signup", json={"username": "asha", "email": "x@mail.com", "password": "secret123"})
    assert resp.status_code == 400

    assert client.post("/login", json={"email": "asha@mail.com", "password": "nope"}).status_code == 401
    resp = client.post("/login", json={"email": "asha@mail.com", "password": "secret123"})
    assert resp.status_code == 200
    assert resp.json()["user_id"] == account["user_id"]


def test_logout_invalidates_token(client, signup):
    token = signup()["token"]
    assert client.post("/logout", data={"token": token}).status_code == 200
    assert client.get("/profile", params={"token": token}).status_code == 401


def test_requires_valid_token(client):
    assert log(client, "bogus", activity_type="food", diet_type="plant-based-local").status_code == 401
    assert client.get("/dashboard", params={"token": "bogus"}).status_code == 401


def test_log_activity_computes_on_server(client, signup):
    token = signup()["token"]
    resp = log(client, token, activity_type="transportation", transportation_mode="bus",
               distance_km="10", carbon_kg="0", points_earned="1000")
    assert resp.status_code == 200
    body = resp.json()
    assert body["carbon_kg"] == pytest.approx(5.67)
    assert body["points_earned"] == 60
    assert body["activity_date"] == date.today().isoformat()

    profile = client.get("/profile", params={"token": token}).json()
    assert profile["total_points"] == 60
    assert profile["total_carbon"] == pytest.approx(5.67)


@pytest.mark.parametrize("fields", [
    {"activity_type": "transportation", "transportation_mode": "car", "distance_km": "-5"},
    {"activity_type": "transportation", "transportation_mode": "car", "distance_km": "NaN"},
    {"activity_type": "transportation", "transportation_mode": "car", "distance_km": "far"},
    {"activity_type": "transportation", "transportation_mode": "car"},
    {"activity_type": "transportation", "transportation_mode": "jetpack", "distance_km": "3"},
    {"activity_type": "energy", "energy_kwh": "0"},
    {"activity_type": "food", "diet_type": "keto"},
    {"activity_type": "shopping"},
    {"activity_type": "food", "diet_type": "plant-based-local", "activity_date": "yesterday"},
])
def test_invalid_activity_rejected_without_writes(client, signup, fields):
    token = signup()["token"]
    resp = log(client, token, **fields)
    assert resp.status_code == 400
    assert client.get("/activities", params={"token": token}).json() == []
    assert client.get("/profile", params={"token": token}).json()["total_points"] == 0


def test_list_activities_window(client, signup):
    token = signup()["token"]
    old = (date.today() - timedelta(days=20)).isoformat()
    log(client, token, activity_type="energy", energy_kwh="100", activity_date=old)
    log(client, token, activity_type="food", diet_type="poultry-moderate")

    assert len(client.get("/activities", params={"token": token}).json()) == 2
    recent = client.get("/activities", params={"token": token, "days": 7}).json()
    assert [a["activity_type"] for a in recent] == ["food"]


def test_dashboard(client, signup):
    token = signup()["token"]
    log(client, token, activity_type="energy", energy_kwh="10")
    log(client, token, activity_type="food", diet_type="dairy-meat-heavy")

    week = client.get("/dashboard", params={"token": token, "range": "week"}).json()
    assert week["days"] == 7
    assert week["total_carbon"] == pytest.approx(11.5)
    assert week["avg_daily"] == pytest.approx(11.5 / 7, abs=1e-4)
    assert week["by_type"] == {"transportation": 0.0, "energy": 8.2, "food": 3.3}
    assert week["daily"] == [{"date": date.today().isoformat(), "carbon_kg": 11.5}]
    assert week["total_points"] == 95

    month = client.get("/dashboard", params={"token": token, "range": "month"}).json()
    assert month["days"] == 30
    assert client.get("/dashboard", params={"token": token, "range": "year"}).status_code == 422


def test_recommendations_endpoint(client, signup):
    token = signup()["token"]
    for _ in range(4):
        log(client, token, activity_type="transportation", transportation_mode="car", distance_km="300")
    log(client, token, activity_type="energy", energy_kwh="160")
    log(client, token, activity_type="food", diet_type="dairy-meat-heavy")

    body = client.get("/recommendations", params={"token": token}).json()
    assert body["total_carbon"] == pytest.approx(4 * 57.6 + 131.2 + 3.3)
    recs = body["recommendations"]
    assert len(recs) == 6
    assert recs[0].startswith("Your carbon footprint is quite high")
    assert recs[1].startswith("Transportation is your biggest")


def test_leaderboard(client, signup):
    a = signup("anil")
    b = signup("bina")
    log(client, a["token"], activity_type="food", diet_type="poultry-moderate")
    log(client, b["token"], activity_type="food", diet_type="plant-based-local")

    board = client.get("/leaderboard", params={"token": a["token"]}).json()
    assert [e["username"] for e in board["top"]] == ["bina", "anil"]
    assert [e["rank"] for e in board["top"]] == [1, 2]
    assert board["your_rank"] == 2

    anonymous = client.get("/leaderboard").json()
    assert anonymous["your_rank"] is None


def test_profile_update_and_password(client, signup):
    token = signup("asha")["token"]
    signup("bina")

    resp = client.put("/profile", params={"token": token}, json={"username": "bina"})
    assert resp.status_code == 400

    resp = client.put("/profile", params={"token": token}, json={"username": "asha"})
    assert resp.json()["changed"] is False

    resp = client.put("/profile", params={"token": token}, json={"username": "asha_r", "email": "asha.r@mail.com"})
    assert resp.status_code == 200
    assert resp.json()["profile"]["username"] == "asha_r"

    bad = client.post("/profile/password", params={"token": token},
                      json={"new_password": "abcdef", "confirm_password": "abcdeg"})
    assert bad.status_code == 422
    short = client.post("/profile/password", params={"token": token},
                        json={"new_password": "abc", "confirm_password": "abc"})
    assert short.status_code == 422

    ok = client.post("/profile/password", params={"token": token},
                     json={"new_password": "newsecret", "confirm_password": "newsecret"})
    assert ok.status_code == 200
    assert client.post("/login", json={"email": "asha.r@mail.com", "password": "newsecret"}).status_code == 200


def test_share(client, signup):
    token = signup()["token"]
    log(client, token, activity_type="food", diet_type="plant-based-local")

    body = client.get("/share", params={"token": token}).json()
    assert body["text"].startswith("I've earned 100 eco-points and reduced my carbon footprint by 1.5 kg CO₂")
    assert set(body["links"]) == {"whatsapp", "telegram", "twitter", "facebook", "linkedin"}

    card = client.get("/share/card.png", params={"token": token})
    assert card.status_code == 200
    assert card.headers["content-type"] == "image/png"
    assert card.content.startswith(b"\x89PNG")


def test_weather(client, monkeypatch):
    monkeypatch.setattr(weather, "fetch_current_weather", lambda: {"temperature": 31.0, "weather_code": 3})
    body = client.get("/weather").json()
    assert body["advice"].startswith("Hot day ahead")

    def unavailable():
        raise WeatherUnavailable("down")

    monkeypatch.setattr(weather, "fetch_current_weather", unavailable)
    assert client.get("/weather").status_code == 502


def test_leaderboard_ties_rank_by_position(client, signup):
    a = signup("anil")
    b = signup("bina")
    log(client, a["token"], activity_type="food", diet_type="poultry-moderate")
    log(client, b["token"], activity_type="food", diet_type="poultry-moderate")

    for account in (a, b):
        board = client.get("/leaderboard", params={"token": account["token"]}).json()
        ranks = {e["username"]: e["rank"] for e in board["top"]}
        assert ranks == {"anil": 1, "bina": 2}
        assert board["your_rank"] == ranks[account["username"]]
        profile = client.get("/profile", params={"token": account["token"]}).json()
        assert profile["rank"] == ranks[account["username"]]


@pytest.mark.parametrize("username", ["", "   ", "\t"])
def test_blank_username_rejected_on_signup(client, username):
    resp = client.post("/signup", json={"username": username, "email": "blank@mail.com", "password": "secret123"})
    assert resp.status_code == 422


def test_username_is_stripped(client, signup):
    account = signup("  meera  ", email="meera@mail.com")
    assert account["username"] == "meera"

    resp = client.put("/profile", params={"token": account["token"]}, json={"username": "  meera_k "})
    assert resp.json()["profile"]["username"] == "meera_k"


def test_blank_username_rejected_on_profile_update(client, signup):
    token = signup("asha")["token"]
    resp = client.put("/profile", params={"token": token}, json={"username": "   "})
    assert resp.status_code == 422
    assert client.get("/profile", params={"token": token}).json()["username"] == "asha"


def test_database_failure_while_logging_writes_nothing(client, signup, monkeypatch):
    token = signup()["token"]

    def broken_update(*args, **kwargs):
        raise OperationalError("UPDATE profiles", {}, Exception("database is locked"))

    monkeypatch.setattr(crud, "update", broken_update)
    resp = log(client, token, activity_type="food", diet_type="plant-based-local")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to log activity"

    assert client.get("/activities", params={"token": token}).json() == []
    assert client.get("/profile", params={"token": token}).json()["total_points"] == 0
