from dataclasses import dataclass


@dataclass(frozen=True)
class CardView:
    uid: int
    suit: str
    rank: int
    face_up: bool


@dataclass(frozen=True)
class PileView:
    cards: tuple[CardView, ...]


@dataclass(frozen=True)
class GameViewModel:
    stock_count: int
    completed_count: int
    game_ended: bool
    piles: tuple[PileView, ...]


@dataclass(frozen=True)
class AnimationEvent:
    type: str
    payload: dict
