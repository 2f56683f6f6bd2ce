import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "sheetgrid")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
DEFAULT_ROWS = 10
DEFAULT_COLS = 5
UNDO_MAX_DEPTH_DEFAULT = 50
EXPORT_FILENAME_DEFAULT = "spreadsheet.csv"
CSV_RAGGED_ROWS_DEFAULT = "pad"


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def _positive_int(value):
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def load_config():
    cfg = {
        "DEFAULT_ROWS": DEFAULT_ROWS,
        "DEFAULT_COLS": DEFAULT_COLS,
        "UNDO_MAX_DEPTH": UNDO_MAX_DEPTH_DEFAULT,
        "EXPORT_FILENAME": EXPORT_FILENAME_DEFAULT,
        "CSV_RAGGED_ROWS": CSV_RAGGED_ROWS_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    grid = data.get("grid")
    if isinstance(grid, dict):
        rows = _positive_int(grid.get("rows"))
        if rows is not None:
            cfg["DEFAULT_ROWS"] = rows
        cols = _positive_int(grid.get("cols"))
        if cols is not None:
            cfg["DEFAULT_COLS"] = cols

    history = data.get("history")
    if isinstance(history, dict) and "max_depth" in history:
        depth = history.get("max_depth")
        if depth is None:
            cfg["UNDO_MAX_DEPTH"] = None  # unbounded
        elif _positive_int(depth) is not None:
            cfg["UNDO_MAX_DEPTH"] = depth

    csv_cfg = data.get("csv")
    if isinstance(csv_cfg, dict):
        name = csv_cfg.get("export_filename")
        if isinstance(name, str) and name.strip():
            cfg["EXPORT_FILENAME"] = name.strip()
        ragged = csv_cfg.get("ragged_rows")
        if ragged in {"pad", "reject"}:
            cfg["CSV_RAGGED_ROWS"] = ragged

    return cfg
