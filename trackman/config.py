import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


LOG_DIR        = os.getenv("LOG_DIR", "logs")
LOG_LEVEL      = os.getenv("LOG_LEVEL", "INFO").strip().upper()
HOST           = os.getenv("HOST", "127.0.0.1")
PORT           = int(os.getenv("PORT", 8765))

# package that owns the platform permissions (the settings deep link points here)
APP_PACKAGE    = os.getenv("APP_PACKAGE", "com.termux")

OPENTRACKS_PACKAGE = os.getenv("OPENTRACKS_PACKAGE", "de.dennisguse.opentracks")
GEOTRACKER_PACKAGE = os.getenv("GEOTRACKER_PACKAGE", "com.ilyabogdanovich.geotracker")
TRACK_CATEGORY     = os.getenv("TRACK_CATEGORY", "In Vehicle Detection")

AM_BINARY          = os.getenv("AM_BINARY", "am")
DISPATCH_TIMEOUT_S = float(os.getenv("DISPATCH_TIMEOUT_S", 0)) or None
NOTIFIER           = os.getenv("NOTIFIER", "termux")

SDK_INT = int(os.getenv("SDK_INT", 34))
ACTIVITY_RECOGNITION_GRANTED = _flag("ACTIVITY_RECOGNITION_GRANTED")
POST_NOTIFICATIONS_GRANTED   = _flag("POST_NOTIFICATIONS_GRANTED")
