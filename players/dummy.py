from typing import override

from players.base import Player
from utils import Action, Play


class DummyPlayer(Player):
    """Always plays its oldest tile."""

    @override
    def get_action(self) -> Action:
        assert self.state is not None
        return Play(self.state.your_hand[0])
