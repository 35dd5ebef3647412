import os

_SOURCE_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), os.pardir))
ROOT_DIR = os.path.normpath(os.path.join(_SOURCE_DIR, os.pardir))

# Logging
LOG_DIR = os.getenv("GAMBITEDITOR_LOG_DIR", os.path.join(ROOT_DIR, "debug", "logs"))
LOG_NAME = "app.log"

# Pretty-print indent used when synchronized JSON is handed back to the host
try:
    JSON_INDENT = int(os.getenv("GAMBITEDITOR_JSON_INDENT", "2"))
except ValueError:
    JSON_INDENT = 2

# Optional action catalog file (id -> display name)
ACTION_CATALOG_PATH = os.getenv(
    "GAMBITEDITOR_ACTION_CATALOG", os.path.join(_SOURCE_DIR, "data", "actions.json")
)

# Keep a .bak copy of the previous file when saving through FileSurface
BACKUP_ON_SAVE = os.getenv("GAMBITEDITOR_BACKUP_ON_SAVE", "1").strip().lower() not in ("0", "false", "no", "off")

# Placeholder shown for action ids the catalog cannot resolve
UNKNOWN_ACTION = "Unknown"
