import sys
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Final, Sequence

from metrics.post_move import CriticalDiscardMetric, DeadDiscardMetric, PostMoveMetric
from players import Player
from utils import (
    Action,
    Discard,
    GameState,
    GiveInfo,
    Log,
    MAX_FUSES,
    MAX_HINT_TOKENS,
    Play,
    Suit,
    Tile,
    Turn,
    format_hand,
    make_deck,
)

MAX_PLAYERS: Final[int] = 5
MIN_PLAYERS: Final[int] = 2


class IllegalActionError(RuntimeError):
    """A player asked for something the rules don't allow."""


@unique
class EndReason(Enum):
    FUSES = 0
    EMPTY_DRAW_PILE = 1
    PERFECT_GAME = 2
    NOT_ENDED = 3


@dataclass
class GameOutcome:
    points: int
    end_reason: EndReason
    metrics: dict[str, int | float] = field(default_factory=dict)


class Game:
    def __init__(
        self, players: Sequence[Player], log=sys.stdout, transcript: Log | None = None
    ):
        if not (MIN_PLAYERS <= len(players) <= MAX_PLAYERS):
            raise RuntimeError(
                f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}"
            )
        for i, p in enumerate(players):
            assert p.pnr == i, f"player {p.name} sits at {i} but thinks it's {p.pnr}"

        self.players = players
        self.log = log
        self.transcript = transcript

        self.fuses = 0
        self.hints = MAX_HINT_TOKENS
        self.current_player = 0
        self.next_play = {s: 1 for s in Suit}
        self.played: list[Tile] = []
        self.trash: list[Tile] = []
        self.history: list[Turn] = []
        self.deck = make_deck()
        self.initial_deck = list(self.deck)
        self.extra_turns = 0
        self.turn = 0
        self.hands: list[list[Tile]] = []
        self.metrics: dict[str, PostMoveMetric] = {
            "critical_discards": CriticalDiscardMetric(),
            "dead_discards": DeadDiscardMetric(),
        }
        self.make_hands()

    def make_hands(self):
        handsize = 4
        if len(self.players) < 4:
            handsize = 5
        for i, _ in enumerate(self.players):
            self.hands.append([])
            for _ in range(handsize):
                self.draw_card(i)

    def draw_card(self, pnr=None):
        if pnr is None:
            pnr = self.current_player
        if not self.deck:
            return
        self.hands[pnr].append(self.deck[0])
        del self.deck[0]

    def get_game_state(self, viewpoint: int) -> GameState:
        """The game as seen from `viewpoint`: everything but its own tiles."""
        return GameState(
            viewpoint=viewpoint,
            tokens=self.hints,
            discard=list(self.trash),
            played=list(self.played),
            your_hand=[t.uid for t in self.hands[viewpoint]],
            hands={
                i: list(h) for i, h in enumerate(self.hands) if i != viewpoint
            },
            next_play=dict(self.next_play),
            fuses=self.fuses,
            history=list(self.history),
        )

    def _take_tile(self, pnr: int, tile_id: int) -> Tile:
        for i, tile in enumerate(self.hands[pnr]):
            if tile.uid == tile_id:
                del self.hands[pnr][i]
                return tile
        raise IllegalActionError(
            f"{self.players[pnr].name} doesn't hold tile {tile_id}"
        )

    def _lose_tile(self, tile: Tile, misplay: bool) -> None:
        self.trash.append(tile)
        for metric in self.metrics.values():
            metric(
                lost_tile=tile,
                discard=self.trash,
                next_play=self.next_play,
                misplay=misplay,
            )

    def perform(self, action: Action):
        pnr = self.current_player
        name = self.players[pnr].name
        targeted: tuple[int, ...] = ()

        match action:
            case GiveInfo(target_player=target, value=value):
                if self.hints == 0:
                    raise IllegalActionError("Can't give info with 0 tokens")
                if target == pnr or not (0 <= target < len(self.players)):
                    raise IllegalActionError(f"{name} can't give info to player {target}")

                self.hints -= 1
                targeted = tuple(t.uid for t in self.hands[target] if action.matches(t))
                print(
                    name,
                    "tells",
                    self.players[target].name,
                    "about all their",
                    value,
                    "tiles",
                    "hints remaining:",
                    self.hints,
                    file=self.log,
                )
                print(
                    self.players[target].name,
                    "has",
                    format_hand(self.hands[target]),
                    file=self.log,
                )
            case Play(tile_id=tile_id):
                tile = self._take_tile(pnr, tile_id)
                print(name, "plays", tile, file=self.log)
                if self.next_play[tile.suit] == tile.number:
                    self.next_play[tile.suit] += 1
                    self.played.append(tile)
                    if tile.number == 5:
                        self.hints = min(self.hints + 1, MAX_HINT_TOKENS)
                    print("successfully! Next plays:", self._format_board(), file=self.log)
                else:
                    self.fuses += 1
                    self._lose_tile(tile, misplay=True)
                    print(
                        "and fails. Fuses blown:",
                        self.fuses,
                        "Next plays:",
                        self._format_board(),
                        file=self.log,
                    )
                self.draw_card(pnr)
                print(name, "now has", format_hand(self.hands[pnr]), file=self.log)
            case Discard(tile_id=tile_id):
                if self.hints == MAX_HINT_TOKENS:
                    raise IllegalActionError(f"Can't discard with {MAX_HINT_TOKENS} tokens")
                tile = self._take_tile(pnr, tile_id)
                self.hints += 1
                self._lose_tile(tile, misplay=False)
                print(name, "discards", tile, file=self.log)
                print("trash is now", format_hand(self.trash), file=self.log)
                self.draw_card(pnr)
                print(name, "now has", format_hand(self.hands[pnr]), file=self.log)
            case _:
                raise IllegalActionError(f"Unknown action: {action!r}")

        self.history.append(Turn(action, pnr, targeted))
        if self.transcript is not None:
            self.transcript.log_action(pnr, action)

    def _format_board(self) -> str:
        return " ".join(f"[{s} {n - 1}]" for s, n in self.next_play.items())

    def single_turn(self):
        if self.done():
            return
        self.turn += 1
        if not self.deck:
            self.extra_turns += 1

        for p in self.players:
            p.update(self.get_game_state(p.pnr))
        action = self.players[self.current_player].get_action()
        self.perform(action)
        self.current_player += 1
        self.current_player %= len(self.players)

    def external_turn(self, action: Action):
        """
        Apply an action chosen outside the game (e.g. by a human) for the
        current player.
        """
        if self.done():
            return
        self.turn += 1
        if not self.deck:
            self.extra_turns += 1
        self.perform(action)
        self.current_player += 1
        self.current_player %= len(self.players)

    def run(self, turns=-1) -> GameOutcome:
        for p in self.players:
            p.reset()
        if self.transcript is not None:
            self.transcript.log_game_start(len(self.players), self.initial_deck)

        while not self.done() and (turns < 0 or self.turn < turns):
            print("Turn", self.turn + 1, file=self.log)
            self.single_turn()

        reason = self.end_reason()
        points = self.score()
        print("Game done, fuses blown:", self.fuses, file=self.log)
        print("Points:", points, reason.name, file=self.log)
        if self.transcript is not None:
            self.transcript.log_game_end(points, reason.name)

        metrics: dict[str, int | float] = {
            name: m.final_value for name, m in self.metrics.items()
        }
        metrics["turns"] = self.turn
        return GameOutcome(points, reason, metrics)

    def score(self) -> int:
        return sum(n - 1 for n in self.next_play.values())

    def end_reason(self) -> EndReason:
        if self.fuses >= MAX_FUSES:
            return EndReason.FUSES
        if all(n == 6 for n in self.next_play.values()):
            return EndReason.PERFECT_GAME
        if self.extra_turns == len(self.players):
            return EndReason.EMPTY_DRAW_PILE
        return EndReason.NOT_ENDED

    def done(self) -> bool:
        return self.end_reason() is not EndReason.NOT_ENDED
