from dataclasses import dataclass, field
from typing import Final, Iterator

from infotracker.belief_store import BeliefStore
from utils import GameState, GiveInfo, Suit, Tile, TileIdentity, Turn

# Strength added to the info tile once its finesse target has been played
FINESSE_CONFIRMED_STRENGTH: Final[int] = 50


@dataclass
class Finesse:
    """
    A suspected two-tile chain: info was given on `info_tile`, but it only makes
    sense once `target_tile` (one rank below, held by someone else) is played.
    """

    info_tile: int
    target_tile: int
    info_possible: list[TileIdentity]
    target_possible: list[TileIdentity]
    turn_given: int
    giver: int
    target_holder: int
    expected_turn: int
    """Last turn on which the target holder gets a chance to play the target"""
    confirmed: bool = field(default=False, compare=False)

    def is_pending(self, turn_number: int) -> bool:
        return turn_number <= self.expected_turn

    def is_dead(self, next_play: dict[Suit, int]) -> bool:
        return all(
            next_play[t.suit] > t.number for t in self.info_possible
        ) and all(next_play[t.suit] > t.number for t in self.target_possible)


def possible_finesse_targets(
    gs: GameState, giver: int, exclude: tuple[int, ...] = ()
) -> list[tuple[int, Tile]]:
    """
    Newest tiles in other hands that are playable right now and that `giver`
    can see (they aren't in the giver's own hand).
    """
    targets = []
    for pnr in sorted(gs.hands):
        if pnr == giver or pnr in exclude:
            continue
        hand = gs.hands[pnr]
        if hand and gs.is_playable(hand[-1]):
            targets.append((pnr, hand[-1]))
    return targets


class FinesseTracker:
    def __init__(self) -> None:
        self.records: list[Finesse] = []

    def __iter__(self) -> Iterator[Finesse]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def for_info_tile(self, tile_id: int) -> list[Finesse]:
        return [f for f in self.records if f.info_tile == tile_id]

    def for_target_tile(self, tile_id: int) -> list[Finesse]:
        return [f for f in self.records if f.target_tile == tile_id]

    def involves(self, tile_id: int) -> bool:
        return any(tile_id in (f.info_tile, f.target_tile) for f in self.records)

    def _add(self, finesse: Finesse) -> None:
        for f in self.records:
            if (f.info_tile, f.target_tile) == (finesse.info_tile, finesse.target_tile):
                return
        self.records.append(finesse)

    def _make(
        self,
        gs: GameState,
        turn: Turn,
        turn_given: int,
        info_tile: int,
        target_tile: int,
        target: TileIdentity,
        holder: int,
    ) -> None:
        self._add(
            Finesse(
                info_tile=info_tile,
                target_tile=target_tile,
                info_possible=[TileIdentity(target.suit, target.number + 1)],
                target_possible=[target],
                turn_given=turn_given,
                giver=turn.acting_player,
                target_holder=holder,
                expected_turn=turn_given
                + gs.seat_distance(turn.acting_player, holder),
            )
        )

    def record_info(
        self, gs: GameState, turn: Turn, turn_given: int, store: BeliefStore
    ) -> None:
        """
        Look at an info turn for signs of a finesse. `store` must already
        reflect the info itself.
        """
        assert isinstance(turn.action, GiveInfo)
        if turn.action.target_player == gs.viewpoint:
            self._record_received(gs, turn, turn_given, store)
        else:
            self._record_observed(gs, turn, turn_given)

    def _record_received(
        self, gs: GameState, turn: Turn, turn_given: int, store: BeliefStore
    ) -> None:
        candidates = possible_finesse_targets(gs, turn.acting_player)
        for uid in turn.targeted_tiles:
            belief = store.lookup(uid)
            if belief.is_definitely_playable(gs.next_play):
                continue
            for holder, target in candidates:
                if target.number == 5:
                    continue
                # the info has to be consistent with being the next tile up
                if TileIdentity(target.suit, target.number + 1) not in belief.possible:
                    continue
                self._make(gs, turn, turn_given, uid, target.uid, target.identity, holder)

    def _record_observed(self, gs: GameState, turn: Turn, turn_given: int) -> None:
        receiver = turn.action.target_player
        targeted = [t for t in gs.hands[receiver] if t.uid in turn.targeted_tiles]
        if not targeted or any(gs.is_playable(t) for t in targeted):
            return

        candidates = possible_finesse_targets(
            gs, turn.acting_player, exclude=(receiver,)
        )
        for tile in targeted:
            if gs.next_play[tile.suit] != tile.number - 1:
                continue
            below = TileIdentity(tile.suit, tile.number - 1)
            holders = [(pnr, t) for pnr, t in candidates if t.identity == below]
            if holders:
                holder, target = holders[0]
                self._make(gs, turn, turn_given, tile.uid, target.uid, below, holder)
            elif turn.acting_player != gs.viewpoint and gs.your_hand:
                # nobody I can see has it, so it must be my newest tile
                self._make(
                    gs, turn, turn_given, tile.uid, gs.your_hand[-1], below, gs.viewpoint
                )

    def cull(self, gs: GameState, store: BeliefStore) -> list[tuple[Finesse, str]]:
        """
        Drop records that are dead or disproven, and confirm the ones whose
        target got played in time. Returns what happened to each touched record.
        """
        played = {t.uid for t in gs.played}
        outcomes: list[tuple[Finesse, str]] = []
        kept = []
        for f in self.records:
            if f.is_dead(gs.next_play):
                outcomes.append((f, "dead"))
                continue
            if not f.is_pending(gs.turn_number):
                if f.target_tile not in played:
                    outcomes.append((f, "disproven"))
                    continue
                if not f.confirmed:
                    f.confirmed = True
                    store.lookup(f.info_tile).play_strength += FINESSE_CONFIRMED_STRENGTH
                    outcomes.append((f, "confirmed"))
            kept.append(f)
        self.records = kept
        return outcomes
