from spider.Core import Game, GameEvent


class Interface:

    def __init__(self):
        self.game: Game = None

    def onStart(self):
        pass

    def onEvent(self, event: GameEvent):
        """
        Invoked when a game event is performed.
        :param event:
        :return:
        """
        self.notifyRedraw()
        pass

    def notifyRedraw(self):
        pass

    def onWin(self):
        pass
