"""Default scan settings and application settings."""

APP_NAME = "FL Backup Cleaner"
APP_VERSION = "1.0.0"
WINDOW_WIDTH = 900
WINDOW_HEIGHT = 700
WINDOW_MIN_WIDTH = 600
WINDOW_MIN_HEIGHT = 400

DEFAULT_SUB_WORKERS = 4
DEFAULT_MAX_DEPTH = 10
DEFAULT_AUTO_CLEAN = False

# How often the GUI drains the scan event channel (ms)
POLL_INTERVAL_MS = 100
