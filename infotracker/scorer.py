from dataclasses import dataclass
from typing import Final, Iterator

from infotracker.belief_store import BeliefStore
from infotracker.finesse import FinesseTracker
from utils import (
    Action,
    Discard,
    GameState,
    GiveInfo,
    InfoType,
    MAX_HINT_TOKENS,
    Play,
    Tile,
)

# Strength required to play a tile while fewer than DANGER_FUSES are blown
SAFE_STRENGTH_TO_PLAY: Final[int] = 15
# Strength required to play a tile once DANGER_FUSES are blown
DANGER_STRENGTH_TO_PLAY: Final[int] = 50
DANGER_FUSES: Final[int] = 2

CERTAIN_PLAY_FITNESS: Final[int] = 1000
FINESSE_PLAY_FITNESS: Final[int] = 60

INFO_PLAYABLE_FITNESS: Final[int] = 20
INFO_UNPLAYABLE_FITNESS: Final[int] = -10
# Added on top of the ordinary info fitness when the info sets up a finesse
FINESSE_INFO_BONUS: Final[int] = 35
# Info older than this many turns doesn't count as recent
INFO_AGE_THRESHOLD: Final[int] = 20

DEAD_DISCARD_FITNESS: Final[int] = 5
FALLBACK_DISCARD_FITNESS: Final[int] = 1
FALLBACK_INFO_FITNESS: Final[int] = 0


@dataclass(frozen=True)
class Candidate:
    fitness: int
    action: Action
    reason: str = ""

    def __str__(self) -> str:
        return f"{self.fitness:5d}  {self.action} ({self.reason})"


def _kind_rank(action: Action) -> int:
    """Equal fitness tie-break: play before info before discard."""
    match action:
        case Play():
            return 0
        case GiveInfo():
            return 1
        case Discard():
            return 2
    raise ValueError(f"Unknown action: {action!r}")


def rank(candidates: list[Candidate]) -> list[Candidate]:
    """
    Best first. Ties are broken by action kind, then by generation order.
    """
    indexed = sorted(
        enumerate(candidates),
        key=lambda ic: (-ic[1].fitness, _kind_rank(ic[1].action), ic[0]),
    )
    return [c for _, c in indexed]


class ActionScorer:
    """
    Turns the current beliefs and finesse records into a ranked list of
    actions for the snapshot's viewpoint. Never changes either of them.
    """

    def __init__(
        self, store: BeliefStore, finesses: FinesseTracker, use_finesse: bool = True
    ):
        self.store = store
        self.finesses = finesses
        self.use_finesse = use_finesse

    @staticmethod
    def required_play_strength(gs: GameState) -> int:
        if gs.fuses >= DANGER_FUSES:
            return DANGER_STRENGTH_TO_PLAY
        return SAFE_STRENGTH_TO_PLAY

    def score(self, gs: GameState) -> list[Candidate]:
        candidates = list(self._play_candidates(gs))
        if gs.tokens > 0:
            if self.use_finesse:
                candidates.extend(self._finesse_info_candidates(gs))
            candidates.extend(self._direct_info_candidates(gs))
        candidates.extend(self._fallback_candidates(gs))
        return rank(candidates)

    @staticmethod
    def _seats(gs: GameState) -> list[int]:
        """Other seats in turn order, starting with the next player."""
        return [
            (gs.viewpoint + i) % gs.num_players for i in range(1, gs.num_players)
        ]

    ###################################################
    # PLAY ACTIONS
    ###################################################

    def _play_candidates(self, gs: GameState) -> Iterator[Candidate]:
        required = self.required_play_strength(gs)
        played = {t.uid for t in gs.played}

        for uid in gs.your_hand:
            belief = self.store.get(uid)
            if belief.is_definitely_playable(gs.next_play):
                yield Candidate(CERTAIN_PLAY_FITNESS, Play(uid), "definitely playable")
                continue

            if self.use_finesse:
                finesses = self.finesses.for_info_tile(uid)
                confirmed = [
                    f
                    for f in finesses
                    if not f.is_pending(gs.turn_number) and f.target_tile in played
                ]
                if confirmed and not belief.is_unplayable(gs.next_play):
                    yield Candidate(
                        max(belief.play_strength, FINESSE_PLAY_FITNESS),
                        Play(uid),
                        "finesse target was played",
                    )
                    continue
                if any(f.is_pending(gs.turn_number) for f in finesses):
                    # wait for the target holder to act first
                    continue

                if self._is_bound_finesse_target(gs, uid):
                    yield Candidate(FINESSE_PLAY_FITNESS, Play(uid), "finessed")
                    continue

            if belief.play_strength >= required and not belief.is_unplayable(
                gs.next_play
            ):
                yield Candidate(
                    belief.play_strength,
                    Play(uid),
                    f"play strength {belief.play_strength}",
                )

    def _is_bound_finesse_target(self, gs: GameState, uid: int) -> bool:
        belief = self.store.get(uid)
        for f in self.finesses.for_target_tile(uid):
            if f.target_holder != gs.viewpoint or not f.is_pending(gs.turn_number):
                continue
            for identity in f.target_possible:
                if gs.is_playable(identity) and identity in belief.possible:
                    return True
        return False

    ###################################################
    # INFO ACTIONS
    ###################################################

    def _info_fitness(self, gs: GameState, info: GiveInfo) -> int:
        targeted = [t for t in gs.hands[info.target_player] if info.matches(t)]
        good = sum(1 for t in targeted if gs.is_playable(t))
        return INFO_PLAYABLE_FITNESS * good + INFO_UNPLAYABLE_FITNESS * (
            len(targeted) - good
        )

    @staticmethod
    def _info_options(pnr: int, tile: Tile) -> tuple[GiveInfo, GiveInfo]:
        return (
            GiveInfo(pnr, InfoType.NUMBER, tile.number),
            GiveInfo(pnr, InfoType.SUIT, tile.suit),
        )

    def _finesse_info_candidates(self, gs: GameState) -> Iterator[Candidate]:
        """
        Info on a tile that becomes playable right after some other player's
        newest tile is played. That player has to work out the finesse and play
        first, so one info gets two tiles played.
        """
        seats = self._seats(gs)
        for receiver in seats:
            hand = gs.hands[receiver]
            for tile in hand:
                if gs.next_play[tile.suit] != tile.number - 1:
                    continue
                if self.finesses.involves(tile.uid):
                    continue

                for holder in seats:
                    if holder == receiver or not gs.hands[holder]:
                        continue
                    target = gs.hands[holder][-1]
                    if target.suit != tile.suit or target.number != tile.number - 1:
                        continue
                    if any(t.same(target) for t in hand):
                        continue

                    best = None
                    number_info, suit_info = self._info_options(receiver, tile)
                    # number only wins when strictly better, as for direct info
                    for info in (suit_info, number_info):
                        targeted = [t for t in hand if info.matches(t)]
                        # any directly playable tile would hide the finesse
                        if any(gs.is_playable(t) for t in targeted):
                            continue
                        fitness = self._info_fitness(gs, info) + FINESSE_INFO_BONUS
                        if best is None or fitness > best.fitness:
                            best = Candidate(
                                fitness,
                                info,
                                f"finesse {tile} through player {holder}'s {target}",
                            )
                    if best is not None:
                        yield best
                        break

    def _copy_has_newer_info(self, gs: GameState, tile: Tile) -> bool:
        age = self.store.get(tile.uid).info_age
        for other in gs.all_hands():
            if other.uid == tile.uid or not other.same(tile):
                continue
            other_age = self.store.get(other.uid).info_age
            if other_age >= 0 and (age == -1 or other_age < age):
                return True
        return False

    def _direct_info_candidates(self, gs: GameState) -> Iterator[Candidate]:
        playable = [
            (pnr, tile)
            for pnr in self._seats(gs)
            for tile in gs.hands[pnr]
            if gs.is_playable(tile)
        ]
        playable.sort(key=lambda pt: pt[1].number)

        for pnr, tile in playable:
            if self.finesses.involves(tile.uid):
                continue
            age = self.store.get(tile.uid).info_age
            if age != -1 and age <= INFO_AGE_THRESHOLD:
                continue
            if self._copy_has_newer_info(gs, tile):
                continue

            number_info, suit_info = self._info_options(pnr, tile)
            number_fitness = self._info_fitness(gs, number_info)
            suit_fitness = self._info_fitness(gs, suit_info)
            if number_fitness > suit_fitness:
                yield Candidate(number_fitness, number_info, f"{tile} is playable")
            else:
                yield Candidate(suit_fitness, suit_info, f"{tile} is playable")

    ###################################################
    # NOTHING BETTER TO DO
    ###################################################

    def _fallback_candidates(self, gs: GameState) -> Iterator[Candidate]:
        if gs.tokens < MAX_HINT_TOKENS:
            for uid in gs.your_hand:
                # played past, or stuck behind a fully discarded lower number
                possible = self.store.get(uid).possible
                if all(gs.is_dead(t.suit, t.number) for t in possible):
                    yield Candidate(DEAD_DISCARD_FITNESS, Discard(uid), "dead tile")
            if gs.your_hand:
                yield Candidate(
                    FALLBACK_DISCARD_FITNESS,
                    Discard(gs.your_hand[0]),
                    "oldest tile",
                )
        else:
            # discarding is illegal, so spend the token where it does least harm
            least = None
            for pnr in self._seats(gs):
                for tile in gs.hands[pnr]:
                    distance = tile.number - gs.next_play[tile.suit]
                    if least is None or distance > least[0]:
                        least = (distance, pnr, tile)
            if least is not None:
                _, pnr, tile = least
                yield Candidate(
                    FALLBACK_INFO_FITNESS,
                    GiveInfo(pnr, InfoType.NUMBER, tile.number),
                    f"least playable tile {tile}",
                )
