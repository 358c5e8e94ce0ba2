import logging
from pathlib import Path

from spider.Core import Game
from storage.state_codec import STOCK_KEY, TABLEAU_KEY, DecodeError, decode_game, encode_game

log = logging.getLogger(__name__)

SLOT_COUNT = 3
SAVE_PREFIX = "slot"
SAVE_SUFFIX = ".json"


class MemoryStorage:
    """Key/value storage kept in a dict."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def contains(self, key: str) -> bool:
        return key in self.data

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str):
        self.data[key] = value

    def remove(self, key: str):
        self.data.pop(key, None)


class FileStorage:
    """Key/value storage with one UTF-8 file per key inside ``directory``."""

    def __init__(self, directory):
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}{SAVE_SUFFIX}"

    def contains(self, key: str) -> bool:
        return self._path(key).is_file()

    def get(self, key: str) -> str | None:
        if not self.contains(key):
            return None
        return self._path(key).read_text(encoding="utf-8")

    def set(self, key: str, value: str):
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def remove(self, key: str):
        path = self._path(key)
        if path.exists():
            path.unlink()


def valid_slot(slot: int) -> int:
    try:
        slot_int = int(slot)
    except (TypeError, ValueError):
        slot_int = 1
    if slot_int < 1:
        slot_int = 1
    if slot_int > SLOT_COUNT:
        slot_int = SLOT_COUNT
    return slot_int


def _slot_key(key: str, slot: int) -> str:
    return f"{SAVE_PREFIX}{valid_slot(slot)}.{key}"


def _read_slot(storage, slot: int) -> dict[str, str | None]:
    return {key: storage.get(_slot_key(key, slot)) for key in (TABLEAU_KEY, STOCK_KEY)}


def has_saved_game(storage, slot: int = 1) -> bool:
    return all(storage.contains(_slot_key(key, slot)) for key in (TABLEAU_KEY, STOCK_KEY))


def save_game(game: Game, storage, slot: int = 1) -> bool:
    try:
        blob = encode_game(game)
    except (TypeError, ValueError):
        log.error("could not encode game for slot %d", valid_slot(slot), exc_info=True)
        return False
    written = []
    try:
        for key in (TABLEAU_KEY, STOCK_KEY):
            storage.set(_slot_key(key, slot), blob[key])
            written.append(key)
    except OSError:
        log.error("could not write slot %d", valid_slot(slot), exc_info=True)
        for key in written:
            try:
                storage.remove(_slot_key(key, slot))
            except OSError:
                log.warning("could not roll back %s in slot %d", key, valid_slot(slot))
        return False
    return True


def load_game(storage, slot: int = 1) -> Game | None:
    try:
        raw = _read_slot(storage, slot)
    except (OSError, UnicodeDecodeError):
        log.warning("could not read slot %d", valid_slot(slot), exc_info=True)
        return None
    missing = [key for key, value in raw.items() if value is None]
    if len(missing) == len(raw):
        return None
    if missing:
        log.warning("slot %d holds a partial save (missing %s), ignoring it", valid_slot(slot), ", ".join(missing))
        return None
    try:
        return decode_game(raw)
    except DecodeError as e:
        log.warning("slot %d holds a corrupt save: %s", valid_slot(slot), e)
        return None


def restore_game(game: Game, storage, slot: int = 1) -> bool:
    loaded = load_game(storage, slot)
    if loaded is None:
        return False
    game.replaceWith(loaded)
    return True


def clear_game(storage, slot: int = 1) -> bool:
    try:
        for key in (TABLEAU_KEY, STOCK_KEY):
            storage.remove(_slot_key(key, slot))
    except OSError:
        log.error("could not clear slot %d", valid_slot(slot), exc_info=True)
        return False
    return True


def list_slot_status(storage) -> list[dict]:
    rows = []
    for slot in range(1, SLOT_COUNT + 1):
        rows.append({"slot": slot, "exists": has_saved_game(storage, slot)})
    return rows
