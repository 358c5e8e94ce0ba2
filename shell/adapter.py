from spider.Core import CardMove, Game, GameEvent, RevealTop, SequenceCleared
from shell.view_model import AnimationEvent, CardView, GameViewModel, PileView


class GameAdapter:
    """Bridges Game state/events to a renderer-friendly model."""

    @staticmethod
    def snapshot(game: Game) -> GameViewModel:
        piles = []
        for pile in game.tableau:
            cards = tuple(
                CardView(uid=card.uid, suit=card.suit, rank=card.rank, face_up=card.faceUp)
                for card in pile
            )
            piles.append(PileView(cards=cards))
        return GameViewModel(
            stock_count=len(game.stock),
            completed_count=game.completedCount,
            game_ended=game.gameEnded,
            piles=tuple(piles),
        )

    @staticmethod
    def event_to_animation(event: GameEvent) -> AnimationEvent:
        if isinstance(event, CardMove):
            return AnimationEvent(
                type="MOVE",
                payload={"src": event.src, "dest": event.dest},
            )
        if isinstance(event, RevealTop):
            return AnimationEvent(
                type="REVEAL",
                payload={"pile": event.idx},
            )
        if isinstance(event, SequenceCleared):
            return AnimationEvent(
                type="COMPLETE_SEQUENCE",
                payload={"pile": event.idx, "suit": event.suit},
            )
        return AnimationEvent(type="UNKNOWN", payload={"event": type(event).__name__})
