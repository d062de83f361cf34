from typing import override

from infotracker import InfoTracker
from players.base import Player
from utils import Action, GameState


class InfoGiverPlayer(Player):
    """
    Bot that lets an InfoTracker keep its books and just takes whatever the
    tracker ranks best.
    """

    def __init__(self, name, pnr, use_finesse: bool = True):
        super().__init__(name, pnr)
        self.use_finesse = use_finesse
        self.tracker = InfoTracker(pnr, use_finesse)

    @override
    def reset(self) -> None:
        super().reset()
        self.tracker = InfoTracker(self.pnr, self.use_finesse)

    @override
    def update(self, game_state: GameState) -> None:
        super().update(game_state)
        self.tracker.update(game_state)

    @override
    def get_action(self) -> Action:
        assert self.state is not None
        candidates = self.tracker.get_scored_actions()

        self.explanation = []
        self.explanation.append(
            ["My Hand"]
            + [repr(self.tracker.lookup(uid)) for uid in self.state.your_hand]
        )
        self.explanation.append(
            ["Finesses"] + [f"{f} ({what})" for f, what in self.tracker.finesse_log]
        )
        self.explanation.append(["Candidates"] + list(map(str, candidates)))
        return candidates[0].action
