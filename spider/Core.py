import logging
import random

log = logging.getLogger(__name__)

SETS = 8
PILE_COUNT = 10
TALL_PILES = 4
TALL_PILE_SIZE = 6
SHORT_PILE_SIZE = 5
DECK_SIZE = SETS * 13


def lastOf(lst):
    return lst[len(lst) - 1]


class Card:
    NUM_PER_SUIT = 13
    SUITS = ("Spades", "Hearts", "Clubs", "Diamonds")
    SYMBOLS = "♠♥♣♦"
    NUMS = ("A ", "2 ", "3 ", "4 ", "5 ", "6 ", "7 ", "8 ", "9 ", "10", "J ", "Q ", "K ")

    def __init__(self, suit, rank, faceUp=False, uid=None):
        if suit not in Card.SUITS:
            raise ValueError(f"unknown suit: {suit!r}")
        if isinstance(rank, bool) or not isinstance(rank, int) or not 1 <= rank <= Card.NUM_PER_SUIT:
            raise ValueError(f"rank out of range: {rank!r}")
        self.__suit = suit
        self.__rank = rank
        self.faceUp = faceUp
        self.uid = uid

    @property
    def suit(self):
        return self.__suit

    @property
    def rank(self):
        return self.__rank

    def __eq__(self, other):
        if not isinstance(other, Card):
            return NotImplemented
        return self.__suit == other.__suit and self.__rank == other.__rank

    def __hash__(self):
        return hash((self.__suit, self.__rank))

    def __str__(self):
        s = Card.SYMBOLS[Card.SUITS.index(self.__suit)] + str(self.__rank)
        if not self.faceUp:
            return s + "H"
        return s

    def __repr__(self):
        return self.__str__()

    def gameStr(self):
        if not self.faceUp:
            return "---"
        return Card.SYMBOLS[Card.SUITS.index(self.__suit)] + Card.NUMS[self.__rank - 1]

    def suitableAsSequenceFor(self, upper):
        return self.__suit == upper.suit and self.__rank == upper.rank + 1

    @staticmethod
    def extendStack(stack, suit, faceUp=False):
        """
        Appends a complete run, King at the bottom and Ace on top.
        """
        for rank in range(Card.NUM_PER_SUIT, 0, -1):
            stack.append(Card(suit, rank, faceUp))


def buildDeck(suit="Spades", rng=None):
    """
    Builds the 104 face-down cards of a one-suit game and shuffles them.

    Cards are numbered before the shuffle, so every uid in the deck is unique.
    """
    deck = []
    for _ in range(SETS):
        for rank in range(1, Card.NUM_PER_SUIT + 1):
            deck.append(Card(suit, rank, False, len(deck)))
    (rng if rng is not None else random.Random()).shuffle(deck)
    return deck


def dealTableau(deck):
    """
    :param deck: the cards to deal, consumed from the front
    :return: a pair of (tableau, stock)
    """
    tableau = []
    pos = 0
    for i in range(PILE_COUNT):
        count = TALL_PILE_SIZE if i < TALL_PILES else SHORT_PILE_SIZE
        pile = list(deck[pos:pos + count])
        pos += len(pile)
        for card in pile:
            card.faceUp = False
        if len(pile) > 0:
            lastOf(pile).faceUp = True
        tableau.append(pile)
    stock = list(deck[pos:])
    for card in stock:
        card.faceUp = False
    return tableau, stock


def canMove(card, pile):
    if len(pile) == 0:
        return True
    top = lastOf(pile)
    return card.suit == top.suit and card.rank == top.rank - 1


def isValidRun(pile, idx):
    """
    Whether the cards from ``idx`` to the top of ``pile`` may be picked up together.
    """
    if idx < 0 or idx >= len(pile):
        return False
    base = pile[idx]
    if not base.faceUp:
        return False
    for i in range(idx + 1, len(pile)):
        upper = pile[i]
        if not base.suitableAsSequenceFor(upper):
            return False
        base = upper
    return True


def isCompleteSequence(cards):
    if len(cards) != Card.NUM_PER_SUIT:
        return False
    for i in range(len(cards) - 1):
        if not cards[i].suitableAsSequenceFor(cards[i + 1]):
            return False
    return True


def resolveSequences(tableau):
    """
    Removes a complete King-to-Ace run from the top of every pile that ends with one.

    :return: indices of the piles that lost a run
    """
    freed = []
    for idx, pile in enumerate(tableau):
        if len(pile) < Card.NUM_PER_SUIT:
            continue
        if isCompleteSequence(pile[-Card.NUM_PER_SUIT:]):
            del pile[-Card.NUM_PER_SUIT:]
            freed.append(idx)
    return freed


def isWon(game):
    if len(game.stock) != 0:
        return False
    for pile in game.tableau:
        if len(pile) != 0:
            return False
    return True


class MoveResult:
    MOVED = "moved"
    NOT_FOUND = "not_found"
    BAD_TARGET = "bad_target"
    ILLEGAL = "illegal"


class GameConfig:
    def __init__(self):
        self.suit = "Spades"
        self.seed = None

    def makeRandom(self):
        return random.Random(self.seed)


class GameEvent:
    pass


class CardMove(GameEvent):
    def __init__(self, src: (int, int), dest: (int, int)):
        self.src = src
        self.dest = dest


class SequenceCleared(GameEvent):
    def __init__(self, idx, suit):
        self.idx = idx
        self.suit = suit


class RevealTop(GameEvent):
    def __init__(self, idx):
        self.idx = idx


class Game:
    """
    ask*** : called by collaborators, validated.
    do*** : actual operation, only structural checks.
    """
    DEFAULT_CONFIG = GameConfig()

    def __init__(self, tableau=None, stock=None):
        self.interface = None
        if tableau is None:
            tableau = [[] for _ in range(PILE_COUNT)]
        if len(tableau) != PILE_COUNT:
            raise ValueError(f"a tableau has {PILE_COUNT} piles, got {len(tableau)}")
        self.tableau = [list(pile) for pile in tableau]
        self.stock = list(stock) if stock is not None else []
        self.completedCount = 0
        self.gameEnded = False
        self.__claimIds()

    @staticmethod
    def newGame(config: GameConfig = DEFAULT_CONFIG):
        deck = buildDeck(config.suit, config.makeRandom())
        tableau, stock = dealTableau(deck)
        log.debug("dealt new game, seed=%s", config.seed)
        return Game(tableau, stock)

    def reset(self, config: GameConfig = None):
        return Game.newGame(config if config is not None else Game.DEFAULT_CONFIG)

    def __claimIds(self):
        cards = [card for pile in self.tableau for card in pile] + self.stock
        used = set()
        for card in cards:
            if card.uid is not None and card.uid not in used:
                used.add(card.uid)
            else:
                card.uid = None
        nextId = max(used) + 1 if used else 0
        for card in cards:
            if card.uid is None:
                card.uid = nextId
                nextId += 1

    def registerInterface(self, interface):
        self.interface = interface
        interface.game = self

    def start(self):
        if self.interface is not None:
            self.interface.onStart()

    def replaceWith(self, other):
        """
        Takes over the tableau and stock of ``other``, e.g. a game restored from storage.
        """
        self.tableau = other.tableau
        self.stock = other.stock
        remaining = sum(len(p) for p in self.tableau) + len(self.stock)
        self.completedCount = max(0, (DECK_SIZE - remaining) // Card.NUM_PER_SUIT)
        self.gameEnded = False
        self.__notify(None)

    def __notify(self, event):
        if self.interface is None:
            return
        if event is None:
            self.interface.notifyRedraw()
        else:
            self.interface.onEvent(event)

    def locate(self, card):
        """
        :return: (pile index, position in pile) of the card with the same uid, or None
        """
        if card.uid is None:
            return None
        for s, pile in enumerate(self.tableau):
            for idx, c in enumerate(pile):
                if c.uid == card.uid:
                    return s, idx
        return None

    def isValidTarget(self, dest):
        return 0 <= dest < len(self.tableau)

    def canMoveCard(self, card, dest: int):
        src = self.locate(card)
        if src is None or not self.isValidTarget(dest):
            return False
        (s, idx) = src
        if s == dest:
            return False
        if not isValidRun(self.tableau[s], idx):
            return False
        return canMove(self.tableau[s][idx], self.tableau[dest])

    def askMove(self, card, dest: int):
        src = self.locate(card)
        if src is None:
            return MoveResult.NOT_FOUND
        if not self.isValidTarget(dest):
            return MoveResult.BAD_TARGET
        if not self.canMoveCard(card, dest):
            log.debug("rejected move of %s from pile %d to pile %d", card, src[0], dest)
            return MoveResult.ILLEGAL
        self.doMove(card, dest)
        self.resolveSequences()
        self.checkWin()
        return MoveResult.MOVED

    def doMove(self, card, dest: int):
        src = self.locate(card)
        if src is None:
            return MoveResult.NOT_FOUND
        if not self.isValidTarget(dest):
            return MoveResult.BAD_TARGET
        (s, idx) = src
        srcPile = self.tableau[s]
        moving = srcPile[idx:]
        del srcPile[idx:]
        destPile = self.tableau[dest]
        destPair = (dest, len(destPile))
        destPile.extend(moving)
        log.debug("moved %d card(s) from pile %d to pile %d", len(moving), s, dest)
        self.__notify(CardMove(src, destPair))
        self.doReveal(s)
        return MoveResult.MOVED

    def doReveal(self, idx: int):
        if not self.isValidTarget(idx):
            return False
        pile = self.tableau[idx]
        if len(pile) == 0:
            return False
        card = lastOf(pile)
        if card.faceUp:
            return False
        card.faceUp = True
        self.__notify(RevealTop(idx))
        return True

    def resolveSequences(self):
        suits = {}
        for idx, pile in enumerate(self.tableau):
            if len(pile) >= Card.NUM_PER_SUIT:
                suits[idx] = lastOf(pile).suit
        freed = resolveSequences(self.tableau)
        for idx in freed:
            self.completedCount += 1
            log.debug("cleared a complete sequence from pile %d", idx)
            self.__notify(SequenceCleared(idx, suits[idx]))
            self.doReveal(idx)
        return freed

    def checkWin(self):
        if not isWon(self):
            return False
        if not self.gameEnded:
            self.gameEnded = True
            if self.interface is not None:
                self.interface.onWin()
        return True
