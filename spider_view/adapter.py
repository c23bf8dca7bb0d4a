from spider.Core import CallDeal, CardMove, Core, FreeStack, GameEvent, RestoreSnapshot, RevealTop
from spider_view.view_model import CardView, GameViewModel, StackView, ViewEvent


class CoreAdapter:
    """Projects Core state and events onto read-only, renderer-friendly values."""

    @staticmethod
    def snapshot(core: Core) -> GameViewModel:
        state = core.currentState()
        stacks = []
        for tableau in state.tableaus:
            cards = tuple(
                CardView(suit=int(card.suit), rank=card.rank, face_up=card.faceUp)
                for card in tableau
            )
            stacks.append(StackView(cards=cards))
        return GameViewModel(
            stock_count=len(state.stock),
            completed_suits=state.completedSuits,
            required_suits=core.config.requiredSuits(),
            score=state.score,
            total_moves=state.totalMoves,
            total_undos=core.totalUndos,
            can_undo=core.canUndo(),
            game_ended=core.gameEnded,
            stacks=tuple(stacks),
        )

    @staticmethod
    def event_to_view(event: GameEvent) -> ViewEvent:
        if isinstance(event, CardMove):
            return ViewEvent(
                type="MOVE",
                payload={"src": event.src, "dest": event.dest},
            )
        if isinstance(event, CallDeal):
            return ViewEvent(
                type="DEAL",
                payload={"draw_count": event.drawCount},
            )
        if isinstance(event, RevealTop):
            return ViewEvent(
                type="REVEAL",
                payload={"stack": event.idx},
            )
        if isinstance(event, FreeStack):
            return ViewEvent(
                type="COMPLETE_SUIT",
                payload={"stack": event.idx, "suit": int(event.suit)},
            )
        if isinstance(event, RestoreSnapshot):
            return ViewEvent(
                type="UNDO",
                payload={"remaining": event.remaining},
            )
        return ViewEvent(type="UNKNOWN", payload={"event": type(event).__name__})
