import random
from typing import Final

from utils import Action, GameState


class Player:
    def __init__(self, name: str, pnr: int, hand_size: int = 5):
        self.name: str = name
        self.pnr: int = pnr
        self._hand_size: Final[int] = hand_size

        self.state: GameState | None = None
        self.explanation: list = []

    def reset(self) -> None:
        """
        Sets the player's state back to the initial state, as though it has never played
        a game.
        """
        self.state = None
        self.explanation = []

    def update(self, game_state: GameState) -> None:
        """
        Called once per turn, for every player, with the snapshot from their seat.
        """
        self.state = game_state

    def get_action(self) -> Action:
        assert self.state is not None
        return random.choice(self.state.valid_actions())

    def get_explanation(self):
        return self.explanation
