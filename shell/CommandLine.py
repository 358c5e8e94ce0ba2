import argparse
import logging

from spider.Core import Game, GameConfig, MoveResult
from spider.Interface import Interface
from storage.game_store import FileStorage, restore_game, save_game, valid_slot
from storage.settings_store import load_settings, seed_of

log = logging.getLogger(__name__)

MOVE_ERRORS = {
    MoveResult.NOT_FOUND: "No such card!",
    MoveResult.BAD_TARGET: "Invalid index!",
    MoveResult.ILLEGAL: "Cannot move!",
}


class CommandLineInterface(Interface):

    def __init__(self, storage, slot=1, config: GameConfig = None):
        super().__init__()
        self.storage = storage
        self.slot = valid_slot(slot)
        self.config = config if config is not None else GameConfig()
        self.won = False

    def printAll(self):
        game = self.game
        print(f"Completed: {game.completedCount}        Stock: {len(game.stock)}")
        print("----0----1----2----3----4----5----6----7----8----9---")
        i = 0
        while True:
            has = False
            line = str(i) + ": "
            for pile in game.tableau:
                if len(pile) <= i:
                    line += "     "
                    continue
                has = True
                line += str(pile[i].gameStr())
                line += "  "
            if not has:
                break
            print(line)
            i += 1
        print()
        print()

    def onStart(self):
        print("Game started!")
        self.printAll()

    def notifyRedraw(self):
        self.printAll()

    def onWin(self):
        self.won = True
        print("You win!")

    def newGame(self):
        game = self.game.reset(self.config) if self.game is not None else Game.newGame(self.config)
        game.registerInterface(self)
        self.won = False
        game.start()

    def parseSource(self, text):
        """
        ``p`` picks the top card of pile p, ``p:i`` the card at position i.
        """
        if ":" in text:
            (s, i) = text.split(":", 1)
            s, i = int(s), int(i)
        else:
            s = int(text)
            i = len(self.game.tableau[s]) - 1
        if s < 0 or i < 0:
            raise IndexError(text)
        return self.game.tableau[s][i]

    def handle(self, command: str) -> bool:
        """
        Runs one command, returns False when the shell should stop.
        """
        words = command.split()
        if not words:
            return True
        if words[0] == "mv":
            if len(words) != 3:
                print("Usage: mv <pile>[:<pos>] <dest>")
                return True
            try:
                card = self.parseSource(words[1])
                dest = int(words[2])
            except (ValueError, IndexError):
                print("Invalid index!")
                return True
            result = self.game.askMove(card, dest)
            if result != MoveResult.MOVED:
                print(MOVE_ERRORS[result])
                return True
            if self.won:
                self.newGame()
            save_game(self.game, self.storage, self.slot)
        elif words[0] == "new":
            self.newGame()
        elif words[0] == "save":
            if save_game(self.game, self.storage, self.slot):
                print(f"Saved to slot {self.slot}.")
            else:
                print("Could not save!")
        elif words[0] == "load":
            if restore_game(self.game, self.storage, self.slot):
                print(f"Loaded slot {self.slot}.")
            else:
                print("No saved game!")
        elif words[0] in ("quit", "exit"):
            return False
        else:
            print("Invalid command!")
        return True


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play one-suit Spider Solitaire in the terminal.")
    parser.add_argument("--seed", type=int, default=None, help="Deal seed, overrides the settings file.")
    parser.add_argument("--slot", type=int, default=None, help="Save slot (1-3), overrides the settings file.")
    parser.add_argument("--fresh", action="store_true", help="Ignore the saved game and deal a new one.")
    return parser.parse_args()


def main():
    args = parse_args()
    settings = load_settings()
    logging.basicConfig(level=settings["log_level"], format="%(levelname)s %(name)s: %(message)s")

    config = GameConfig()
    config.seed = args.seed if args.seed is not None else seed_of(settings)
    slot = args.slot if args.slot is not None else int(settings["save_slot"])
    storage = FileStorage(settings["save_dir"])

    interface = CommandLineInterface(storage, slot, config)
    game = Game.newGame(config)
    game.registerInterface(interface)
    if not args.fresh and restore_game(game, storage, interface.slot):
        log.info("resumed slot %d", interface.slot)
    game.start()
    while True:
        try:
            command = input()
        except EOFError:
            break
        if not interface.handle(command):
            break
    save_game(interface.game, storage, interface.slot)


if __name__ == '__main__':
    main()
