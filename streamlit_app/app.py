# streamlit_app/app.py
import streamlit as st
import requests, os
import matplotlib.pyplot as plt
import pandas as pd

API_BASE = os.environ.get("API_BASE", "http://localhost:8000")

st.set_page_config(page_title="EcoTrack", layout="wide", initial_sidebar_state="expanded")

TRANSPORT_MODES = {
    "two_wheeler": "Two-Wheeler (Scooter/Bike)",
    "car": "Car (Petrol/Diesel)",
    "electric_car": "Electric Car",
    "auto_rickshaw": "Auto Rickshaw",
    "bus": "Public Bus",
    "metro_train": "Metro / Train",
    "bike": "Bicycle / Cycle",
    "walk": "Walking",
}
DIET_TYPES = {
    "dairy-meat-heavy": "Heavy Dairy / Red Meat",
    "poultry-moderate": "Poultry, Fish, or Egg (Moderate)",
    "traditional-vegetarian": "Traditional Vegetarian (Dal, Roti/Rice)",
    "plant-based-local": "Plant-Based / Vegan (Local Focus)",
}
CATEGORY_COLORS = {"transportation": "#3b82f6", "energy": "#eab308", "food": "#22c55e"}
RANGE_DAYS = {"week": 7, "month": 30}

# -------------------------------
# Helpers
# -------------------------------
def api_url(path: str):
    return API_BASE.rstrip("/") + path

def error_detail(resp):
    try:
        return resp.json().get("detail", resp.text)
    except ValueError:
        return resp.text

def post_form(path: str, form_data: dict = None):
    """Send a POST to backend where token and other fields are expected as form fields."""
    resp = requests.post(api_url(path), data=form_data or {}, timeout=30)
    if not resp.ok:
        raise RuntimeError(error_detail(resp))
    return resp.json()

def get_json(path: str, params: dict = None):
    resp = requests.get(api_url(path), params=params or {}, timeout=30)
    if not resp.ok:
        raise RuntimeError(error_detail(resp))
    return resp.json()

def send_json(method: str, path: str, payload: dict, params: dict = None):
    resp = requests.request(method, api_url(path), json=payload, params=params or {}, timeout=30)
    if not resp.ok:
        raise RuntimeError(error_detail(resp))
    return resp.json()

def remember_login(data):
    st.session_state["token"] = data.get("token")
    st.session_state["user_info"] = {k: data.get(k) for k in ("user_id", "username", "email", "total_points")}

def activity_detail(a):
    if a["activity_type"] == "transportation":
        return f"{a['transportation_mode'].replace('_', ' ')} - {a['distance_km']} km"
    if a["activity_type"] == "energy":
        return f"{a['energy_kwh']} kWh"
    return a["diet_type"].replace("-", " ")

# -------------------------------
# Sidebar: Auth (Signup / Login)
# -------------------------------
if "token" not in st.session_state:
    st.session_state["token"] = None
if "user_info" not in st.session_state:
    st.session_state["user_info"] = None

st.sidebar.title("EcoTrack")
mode = st.sidebar.radio("Account action", ["Login","Signup","Account"])

if mode == "Signup":
    with st.sidebar.form("signup_form"):
        username = st.text_input("Username")
        email = st.text_input("Email")
        pwd = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Create account")
        if submitted:
            try:
                remember_login(send_json("POST", "/signup", {"username": username, "email": email, "password": pwd}))
                st.success("Account created, you are logged in")
            except Exception as e:
                st.error(f"Signup failed: {e}")

elif mode == "Login":
    with st.sidebar.form("login_form"):
        email = st.text_input("Email")
        pwd = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")
        if submitted:
            try:
                remember_login(send_json("POST", "/login", {"email": email, "password": pwd}))
                st.success("Logged in")
            except Exception as e:
                st.error("Login failed: " + str(e))

else:
    if st.session_state["user_info"]:
        st.sidebar.write("Logged in as", st.session_state["user_info"]["username"])
        if st.sidebar.button("Logout"):
            try:
                post_form("/logout", {"token": st.session_state["token"]})
            except Exception as e:
                st.sidebar.warning("Logout failed on server: " + str(e))
            st.session_state["token"] = None
            st.session_state["user_info"] = None
            st.rerun()
    else:
        st.sidebar.info("Please log in or sign up")

# -------------------------------
# Main app (requires login)
# -------------------------------
if not st.session_state["token"]:
    st.title("Welcome to EcoTrack")
    st.write("Track your daily travel, energy and food, earn eco-points and climb the leaderboard.")
    st.write("Please login or sign up to access the dashboard.")
    st.stop()

token = st.session_state["token"]

tabs = st.tabs(["Dashboard","Log Activity","Tips","Leaderboard","Profile","About"])
tab_dashboard, tab_add, tab_tips, tab_leader, tab_profile, tab_about = tabs

# -------------------------------
# Dashboard tab
# -------------------------------
with tab_dashboard:
    st.header("Your Carbon Dashboard")
    time_range = st.radio("Range", ["week", "month"], horizontal=True, format_func=str.title)
    try:
        summary = get_json("/dashboard", {"token": token, "range": time_range})
    except Exception as e:
        st.error("Could not fetch data: " + str(e))
        summary = None

    if summary:
        c1, c2, c3 = st.columns(3)
        c1.metric(f"Total CO₂ ({time_range})", f"{summary['total_carbon']:.2f} kg")
        c2.metric("Avg daily", f"{summary['avg_daily']:.2f} kg")
        c3.metric("Eco-points", summary["total_points"])

        if summary["activity_count"] == 0:
            st.info("No data yet. Start logging activities!")
        else:
            daily = pd.DataFrame(summary["daily"])
            daily["date"] = pd.to_datetime(daily["date"])

            fig1, ax1 = plt.subplots(figsize=(8,3))
            ax1.plot(daily["date"], daily["carbon_kg"], marker="o", color="#22c55e")
            ax1.fill_between(daily["date"], daily["carbon_kg"], alpha=0.1, color="#22c55e")
            ax1.set_title("Carbon Footprint (kg CO₂)")
            ax1.set_ylabel("kg CO₂")
            ax1.set_ylim(bottom=0)
            ax1.grid(alpha=0.2)
            st.pyplot(fig1)

            by_type = pd.Series(summary["by_type"])
            if by_type.sum() > 0:
                fig2, ax2 = plt.subplots(figsize=(4,4))
                ax2.pie(by_type.values, labels=[t.title() for t in by_type.index],
                        colors=[CATEGORY_COLORS[t] for t in by_type.index],
                        autopct="%1.1f%%", wedgeprops={"width": 0.4})
                ax2.set_title("CO₂ by Category")
                st.pyplot(fig2)

    try:
        recent = get_json("/activities", {"token": token, "days": RANGE_DAYS[time_range]})
    except Exception as e:
        st.error("Could not fetch recent activities: " + str(e))
        recent = []
    if recent:
        st.subheader("Recent Activities")
        for a in reversed(recent):
            when = pd.to_datetime(a["activity_date"]).strftime("%d %b %Y")
            st.write(f"**{a['activity_type'].title()}** · {when} · {activity_detail(a)} · "
                     f"{a['carbon_kg']:.2f} kg CO₂ · +{a['points_earned']} pts")

    st.subheader("Share your achievement")
    try:
        shared = get_json("/share", {"token": token})
        st.write(shared["text"])
        st.markdown(" · ".join(f"[{name.title()}]({url})" for name, url in shared["links"].items()))
        card = requests.get(api_url("/share/card.png"), params={"token": token}, timeout=30)
        if card.ok:
            st.download_button("Download share card", card.content, file_name="EcoTrack_Achievement.png", mime="image/png")
    except Exception as e:
        st.error("Could not load share content: " + str(e))

# -------------------------------
# Log Activity tab
# -------------------------------
with tab_add:
    st.header("Log Activity")
    sub = st.tabs(["Transport","Energy","Food"])
    with sub[0]:
        vehicle = st.selectbox("Transportation mode", list(TRANSPORT_MODES), format_func=TRANSPORT_MODES.get)
        km = st.number_input("Distance (km)", min_value=0.0, step=0.1)
        if st.button("Log transport"):
            try:
                r = post_form("/activities", {"token": token, "activity_type": "transportation",
                                              "transportation_mode": vehicle, "distance_km": km})
                st.success(f"Logged {r['carbon_kg']:.2f} kg CO₂, +{r['points_earned']} points")
            except Exception as e:
                st.error("Error logging activity: " + str(e))

    with sub[1]:
        kwh = st.number_input("Energy usage (kWh)", min_value=0.0, step=0.1)
        st.caption("Average Indian urban home uses ~6-10 kWh per day")
        if st.button("Log energy"):
            try:
                r = post_form("/activities", {"token": token, "activity_type": "energy", "energy_kwh": kwh})
                st.success(f"Logged {r['carbon_kg']:.2f} kg CO₂, +{r['points_earned']} points")
            except Exception as e:
                st.error("Error logging activity: " + str(e))

    with sub[2]:
        diet = st.selectbox("Diet type (today)", list(DIET_TYPES), index=2, format_func=DIET_TYPES.get)
        if st.button("Log food"):
            try:
                r = post_form("/activities", {"token": token, "activity_type": "food", "diet_type": diet})
                st.success(f"Logged {r['carbon_kg']:.2f} kg CO₂, +{r['points_earned']} points")
            except Exception as e:
                st.error("Error logging activity: " + str(e))

# -------------------------------
# Tips
# -------------------------------
with tab_tips:
    st.header("Personalized Recommendations")
    try:
        w = get_json("/weather")
        st.info(f"{w['advice']}  (Current: {w['temperature']}°C)")
    except Exception as e:
        st.caption("Weather unavailable: " + str(e))
    try:
        recs = get_json("/recommendations", {"token": token})
        for i, rec in enumerate(recs["recommendations"], start=1):
            st.write(f"**{i}.** {rec}")
    except Exception as e:
        st.error("Could not load recommendations: " + str(e))

    st.subheader("Did you know?")
    st.write("- Switching from a private two-wheeler to Metro or Bus for a 10 km daily commute can save over 400 kg CO₂ per year.")
    st.write("- Setting your AC temperature just 1 degree higher (from 24°C to 25°C) can save up to 6% on your electricity bill.")
    st.write("- Reducing food waste by just 25% in a typical Indian household can save over 100 kg of CO₂ equivalent annually.")
    st.write("- Using a cloth or reusable bag instead of single-use plastic bags for one year saves roughly 400 bags from landfills.")

# -------------------------------
# Leaderboard
# -------------------------------
with tab_leader:
    st.header("Leaderboard")
    try:
        board = get_json("/leaderboard", {"token": token})
    except Exception as e:
        st.error("Could not fetch leaderboard: " + str(e))
        board = None
    if board:
        if board["your_rank"]:
            st.metric("Your rank", f"#{board['your_rank']}")
        if board["top"]:
            df = pd.DataFrame(board["top"])
            df["created_at"] = pd.to_datetime(df["created_at"]).dt.date
            st.table(df[["rank","username","total_points","created_at"]].rename(columns={"created_at": "joined"}))
        else:
            st.info("Leaderboard empty")

# -------------------------------
# Profile
# -------------------------------
with tab_profile:
    st.header("Profile")
    try:
        prof = get_json("/profile", {"token": token})
    except Exception as e:
        st.error("Could not load profile: " + str(e))
        prof = None
    if prof:
        st.subheader("Account Statistics")
        s1, s2 = st.columns(2)
        s1.metric("Total Points Earned", prof["total_points"])
        s2.metric("Member Since", pd.to_datetime(prof["created_at"]).strftime("%d %B %Y"))
        with st.form("profile_form"):
            new_username = st.text_input("Username", value=prof["username"])
            new_email = st.text_input("Email", value=prof["email"])
            if st.form_submit_button("Save Changes"):
                try:
                    res = send_json("PUT", "/profile", {"username": new_username, "email": new_email}, {"token": token})
                    if res["changed"]:
                        st.success("Profile updated successfully!")
                        st.session_state["user_info"]["username"] = res["profile"]["username"]
                    else:
                        st.info("No changes to save.")
                except Exception as e:
                    st.error("Failed to update profile: " + str(e))
        with st.form("password_form"):
            new_pwd = st.text_input("New password", type="password")
            confirm_pwd = st.text_input("Confirm new password", type="password")
            if st.form_submit_button("Change Password"):
                if new_pwd != confirm_pwd:
                    st.error("New passwords do not match")
                elif len(new_pwd) < 6:
                    st.error("Password must be at least 6 characters long")
                else:
                    try:
                        send_json("POST", "/profile/password", {"new_password": new_pwd, "confirm_password": confirm_pwd}, {"token": token})
                        st.success("Password changed successfully!")
                    except Exception as e:
                        st.error("Failed to change password: " + str(e))

# -------------------------------
# About
# -------------------------------
with tab_about:
    st.header("About EcoTrack")
    st.write("EcoTrack estimates the CO₂ of your daily activities using emission factors for India and rewards greener choices with eco-points.")
    st.subheader("How points work")
    st.table(pd.DataFrame([
        {"activity": "Walking / cycling 20 km or less", "points": "up to 100 (50% bonus)"},
        {"activity": "Bus, Metro, Auto rickshaw", "points": "up to 100 (20% bonus)"},
        {"activity": "Electric car", "points": "up to 100"},
        {"activity": "Car / two-wheeler", "points": "up to 100 (half rate)"},
        {"activity": "Energy use", "points": "100 at 0 kWh, 0 at 200 kWh or more"},
        {"activity": "Plant-based local diet", "points": "100"},
        {"activity": "Traditional vegetarian diet", "points": "75"},
        {"activity": "Poultry / moderate diet", "points": "40"},
        {"activity": "Dairy / meat heavy diet", "points": "0"},
    ]))
