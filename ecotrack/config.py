# ecotrack/config.py
# Runtime settings, overridable through the environment.
import os

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DB_PATH = os.path.join(BASE_DIR, "data", "ecotrack.db")

DATABASE_URL = os.environ.get("ECOTRACK_DATABASE_URL", f"sqlite:///{DB_PATH}")

LOG_LEVEL = os.environ.get("ECOTRACK_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

CORS_ORIGINS = [o.strip() for o in os.environ.get("ECOTRACK_CORS_ORIGINS", "*").split(",") if o.strip()]

# Open-Meteo, Hyderabad by default
WEATHER_URL = os.environ.get("ECOTRACK_WEATHER_URL", "https://api.open-meteo.com/v1/forecast")
WEATHER_LATITUDE = float(os.environ.get("ECOTRACK_WEATHER_LATITUDE", "17.384"))
WEATHER_LONGITUDE = float(os.environ.get("ECOTRACK_WEATHER_LONGITUDE", "78.4564"))
WEATHER_TIMEOUT = float(os.environ.get("ECOTRACK_WEATHER_TIMEOUT", "10"))

SHARE_URL = os.environ.get("ECOTRACK_SHARE_URL", "http://localhost:8501")
