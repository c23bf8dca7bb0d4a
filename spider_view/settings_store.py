import configparser
from pathlib import Path

from spider.Core import MAX_SUITS

SETTINGS_PATH = Path(__file__).with_name("settings.ini")

MODE_ORDER = ("solo", "daily")
LOG_LEVEL_ORDER = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULT_SETTINGS = {
    "suit_count": "4",
    "mode": "solo",
    "log_level": "WARNING",
}


def _sanitize(settings):
    data = dict(DEFAULT_SETTINGS)
    data.update(settings)

    try:
        suit_count = int(data["suit_count"])
    except Exception:
        suit_count = int(DEFAULT_SETTINGS["suit_count"])
    suit_count = max(1, min(MAX_SUITS, suit_count))
    data["suit_count"] = str(suit_count)

    mode = str(data["mode"]).strip().lower()
    if mode not in MODE_ORDER:
        mode = DEFAULT_SETTINGS["mode"]
    data["mode"] = mode

    level = str(data["log_level"]).strip().upper()
    if level not in LOG_LEVEL_ORDER:
        level = DEFAULT_SETTINGS["log_level"]
    data["log_level"] = level

    return {key: data[key] for key in DEFAULT_SETTINGS}


def load_settings():
    parser = configparser.ConfigParser()
    if not SETTINGS_PATH.exists():
        return dict(DEFAULT_SETTINGS)
    try:
        parser.read(SETTINGS_PATH, encoding="utf-8")
    except Exception:
        return dict(DEFAULT_SETTINGS)
    if "game" not in parser:
        return dict(DEFAULT_SETTINGS)
    raw = {key: parser["game"].get(key, default) for key, default in DEFAULT_SETTINGS.items()}
    return _sanitize(raw)


def save_settings(settings):
    data = _sanitize(settings)
    parser = configparser.ConfigParser()
    parser["game"] = data
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with SETTINGS_PATH.open("w", encoding="utf-8") as f:
        parser.write(f)
