import configparser
import logging
from pathlib import Path

log = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).with_name("settings.ini")
SECTION = "shell"

LOG_LEVEL_ORDER = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULT_SETTINGS = {
    "save_slot": "1",
    "save_dir": str(Path.home() / ".spider_solitaire"),
    "log_level": "WARNING",
    "seed": "",
}


def _sanitize(settings):
    data = dict(DEFAULT_SETTINGS)
    data.update({k: str(v) for k, v in settings.items() if k in DEFAULT_SETTINGS and v is not None})

    try:
        slot = int(data["save_slot"])
    except ValueError:
        slot = int(DEFAULT_SETTINGS["save_slot"])
    if slot < 1:
        slot = 1
    if slot > 3:
        slot = 3
    data["save_slot"] = str(slot)

    if not data["save_dir"].strip():
        data["save_dir"] = DEFAULT_SETTINGS["save_dir"]

    level = data["log_level"].strip().upper()
    if level not in LOG_LEVEL_ORDER:
        level = DEFAULT_SETTINGS["log_level"]
    data["log_level"] = level

    seed = data["seed"].strip()
    if seed:
        try:
            seed = str(int(seed))
        except ValueError:
            seed = ""
    data["seed"] = seed
    return data


def seed_of(settings) -> int | None:
    seed = settings.get("seed", "")
    return int(seed) if seed else None


def load_settings():
    parser = configparser.ConfigParser()
    if not SETTINGS_PATH.exists():
        return dict(DEFAULT_SETTINGS)
    try:
        parser.read(SETTINGS_PATH, encoding="utf-8")
    except configparser.Error:
        log.warning("could not parse %s, using defaults", SETTINGS_PATH, exc_info=True)
        return dict(DEFAULT_SETTINGS)
    if SECTION not in parser:
        return dict(DEFAULT_SETTINGS)
    raw = {key: parser[SECTION].get(key, default) for key, default in DEFAULT_SETTINGS.items()}
    return _sanitize(raw)


def save_settings(settings):
    data = _sanitize(settings)
    parser = configparser.ConfigParser()
    parser[SECTION] = data
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with SETTINGS_PATH.open("w", encoding="utf-8") as f:
        parser.write(f)
