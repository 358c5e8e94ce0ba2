import json

from spider.Core import PILE_COUNT, Card, Game

TABLEAU_KEY = "tableau"
STOCK_KEY = "stockpile"


class DecodeError(ValueError):
    pass


def encode_card(card: Card) -> dict:
    return {"suit": card.suit, "rank": card.rank, "isFaceUp": bool(card.faceUp)}


def decode_card(data) -> Card:
    if not isinstance(data, dict):
        raise DecodeError(f"card record must be an object, got {type(data).__name__}")
    suit = data.get("suit")
    rank = data.get("rank")
    face_up = data.get("isFaceUp")
    if not isinstance(face_up, bool):
        raise DecodeError(f"isFaceUp must be a boolean, got {face_up!r}")
    try:
        return Card(suit, rank, face_up)
    except ValueError as e:
        raise DecodeError(str(e)) from e


def encode_stack(cards: list) -> str:
    return json.dumps([encode_card(c) for c in cards])


def encode_tableau(tableau: list) -> str:
    return json.dumps([[encode_card(c) for c in pile] for pile in tableau])


def _parse(raw, what: str):
    if raw is None:
        raise DecodeError(f"missing {what}")
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise DecodeError(f"{what} is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise DecodeError(f"{what} must be a list")
    return data


def decode_stack(raw) -> list:
    return [decode_card(item) for item in _parse(raw, STOCK_KEY)]


def decode_tableau(raw) -> list:
    piles = _parse(raw, TABLEAU_KEY)
    if len(piles) != PILE_COUNT:
        raise DecodeError(f"tableau must hold {PILE_COUNT} piles, got {len(piles)}")
    tableau = []
    for pile in piles:
        if not isinstance(pile, list):
            raise DecodeError("every pile must be a list")
        tableau.append([decode_card(item) for item in pile])
    return tableau


def encode_game(game: Game) -> dict[str, str]:
    return {
        TABLEAU_KEY: encode_tableau(game.tableau),
        STOCK_KEY: encode_stack(game.stock),
    }


def decode_game(blob) -> Game:
    """Rebuilds a game from both persisted values, or raises DecodeError."""
    if not isinstance(blob, dict):
        raise DecodeError("saved state must be a mapping")
    tableau = decode_tableau(blob.get(TABLEAU_KEY))
    stock = decode_stack(blob.get(STOCK_KEY))
    return Game(tableau, stock)
