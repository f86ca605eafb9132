import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

API_TITLE = os.getenv("API_TITLE", "Coaching Schedule Conflict Service")

# Days of class dates to expand when a pass has no end date
SCHEDULE_HORIZON_DAYS = int(os.getenv("SCHEDULE_HORIZON_DAYS", "28"))

# A one-time batch switch must be requested at least this many days before the pass starts
SWITCH_MIN_DAYS_BEFORE_START = int(os.getenv("SWITCH_MIN_DAYS_BEFORE_START", "7"))
