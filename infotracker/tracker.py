import math
from typing import Final

from infotracker.belief_store import BeliefStore, eliminated_identities
from infotracker.errors import NoLegalActionError
from infotracker.finesse import Finesse, FinesseTracker
from infotracker.scorer import ActionScorer, Candidate
from infotracker.unknown_tile import UnknownTile
from utils import Action, GameState, GiveInfo, Turn

# Strength to add to the newest tile included in an info give
NEWEST_INFO_TILE_STRENGTH: Final[int] = 50
# Strength to add to the oldest tile included in an info give
# (tiles between lerp between the two)
OLDEST_INFO_TILE_STRENGTH: Final[int] = 10


def lerp(start: int, end: int, percent: float) -> int:
    return math.floor(start + percent * (end - start))


class InfoTracker:
    """
    Tracks game state and the info being given, and narrows down what each
    player knows about the tiles in their hand, all from one player's seat.

    Call `update` once per snapshot, then `get_best_actions`.
    """

    def __init__(self, pnr: int, use_finesse: bool = True):
        self.pnr = pnr
        self.use_finesse = use_finesse
        self.store = BeliefStore()
        self.finesses = FinesseTracker()
        self.scorer = ActionScorer(self.store, self.finesses, use_finesse)
        self.last_state: GameState | None = None
        self.finesse_log: list[tuple[Finesse, str]] = []
        self._recorded_turns = 0

    def lookup(self, tile_id: int) -> UnknownTile:
        return self.store.lookup(tile_id)

    def update(self, gs: GameState) -> None:
        assert gs.viewpoint == self.pnr, "snapshot is from someone else's seat"
        self.last_state = gs

        # Cross out whatever each player can see all copies of
        for pnr, hand in gs.hands.items():
            eliminated = eliminated_identities(gs, pnr)
            for tile in hand:
                self.store.lookup(tile.uid).cannot_be_any(eliminated, "all visible")

        eliminated = eliminated_identities(gs, self.pnr)
        for uid in gs.your_hand:
            self.store.lookup(uid).cannot_be_any(eliminated, "all visible")

        if len(gs.history) > self._recorded_turns:
            self.record_player_turn(gs, gs.history[-1])
            self._recorded_turns = len(gs.history)

        if self.use_finesse:
            self.finesse_log = self.finesses.cull(gs, self.store)

    def _modify_play_strength(self, gs: GameState, pnr: int, tiles: list[int]) -> None:
        """
        Newest tiles get the strongest play signal, lerping down to the oldest.
        """
        hand = gs.tiles_in_hand(pnr)
        ordered = [uid for uid in reversed(hand) if uid in tiles]
        if len(ordered) == 1:
            self.store.lookup(ordered[0]).play_strength += NEWEST_INFO_TILE_STRENGTH
            return
        for i, uid in enumerate(ordered):
            percent = i / (len(ordered) - 1)
            self.store.lookup(uid).play_strength += lerp(
                NEWEST_INFO_TILE_STRENGTH, OLDEST_INFO_TILE_STRENGTH, percent
            )

    def record_player_turn(self, gs: GameState, turn: Turn) -> None:
        for tile in self.store:
            tile.age_info()

        match turn.action:
            case GiveInfo(target_player=target, value=value):
                reason = f"info from player {turn.acting_player}"
                maybe_playable = []
                for uid in turn.targeted_tiles:
                    lookup = self.store.lookup(uid)
                    lookup.must_be(value, reason)
                    lookup.got_info()
                    if lookup.is_possibly_playable(gs.next_play):
                        maybe_playable.append(uid)

                if maybe_playable:
                    self._modify_play_strength(gs, target, maybe_playable)

                for uid in gs.tiles_in_hand(target):
                    if uid not in turn.targeted_tiles:
                        self.store.lookup(uid).cannot_be(value, reason)

                if self.use_finesse:
                    self.finesses.record_info(gs, turn, len(gs.history) - 1, self.store)

    def get_scored_actions(self) -> list[Candidate]:
        assert self.last_state is not None, "update() must be called first"
        candidates = self.scorer.score(self.last_state)
        if not candidates:
            raise NoLegalActionError(
                f"player {self.pnr} found nothing to do on turn "
                f"{self.last_state.turn_number}"
            )
        return candidates

    def get_best_actions(self) -> list[Action]:
        return [c.action for c in self.get_scored_actions()]
