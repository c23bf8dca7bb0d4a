from spider.Core import Core, GameEvent, GameResult


class Interface:

    def __init__(self):
        self.core: Core = None

    def onStart(self):
        pass

    def onEvent(self, event: GameEvent):
        """
        Invoked after a game event is performed.
        :param event:
        :return:
        """
        self.notifyRedraw()

    def onUndoEvent(self, event: GameEvent):
        """
        Invoked after a snapshot has been restored.
        :param event:
        :return:
        """
        self.notifyRedraw()

    def notifyRedraw(self):
        pass

    def onWin(self, result: GameResult):
        pass

    def onAbort(self, result: GameResult):
        pass
