import argparse
import random
import sys
import traceback
from collections import Counter
from typing import Any

import numpy

from game import EndReason, Game, GameOutcome, IllegalActionError
from infotracker import ContradictionError, NoLegalActionError
from players import DummyPlayer, InfoGiverPlayer, Player
from utils import Log, NullStream

MAX_SCORE = 30

player_types = {
    "random": Player,
    "dummy": DummyPlayer,
    "infogiver": InfoGiverPlayer,
}
names = ["Shangdi", "Yu Di", "Tian", "Nu Wa", "Pangu"]


def make_player(player_type: str, player_id: int) -> Player:
    if player_type in player_types:
        return player_types[player_type](names[player_id], player_id)

    elif player_type == "infogiver-nofinesse":
        return InfoGiverPlayer(names[player_id], player_id, use_finesse=False)

    raise ValueError(f"Unknown player type: {player_type}")


def run_games(
    player_names: list[str],
    n: int,
    seed: int = 0,
    out: Any = None,
    transcript: Log | None = None,
) -> tuple[list[GameOutcome], int]:
    """
    Play `n` games with a fresh set of players each time. Games whose bots hit
    a contradiction or an illegal action are abandoned and counted separately.
    """
    if out is None:
        out = NullStream()

    outcomes = []
    aborted = 0
    for i in range(n):
        random.seed(seed + i)
        players = [make_player(p, j) for j, p in enumerate(player_names)]
        g = Game(players, out, transcript)
        try:
            outcomes.append(g.run())
        except (ContradictionError, NoLegalActionError, IllegalActionError):
            traceback.print_exc()
            aborted += 1
    return outcomes, aborted


def print_stats(outcomes: list[GameOutcome], aborted: int) -> None:
    if not outcomes:
        print("no games finished, aborted:", aborted)
        return

    pts = [o.points for o in outcomes]
    scores = Counter(pts)
    reasons = Counter(o.end_reason for o in outcomes)

    # tab separated so it pastes straight into a spreadsheet
    print("GAMES\t" + str(len(outcomes)))
    print()
    for i in range(MAX_SCORE + 1):
        print(f"{i}\t{scores[i] if i in scores else ''}")
    print("MEAN\t" + str(numpy.mean(pts)))
    if len(pts) > 1:
        print("STDDEV\t" + str(numpy.std(pts, ddof=1)))
    print("MEDIAN\t" + str(numpy.median(pts)))
    print("MIN\t" + str(min(pts)))
    print("MAX\t" + str(max(pts)))
    print()
    for reason in EndReason:
        if reason in reasons:
            print(f"{reason.name}\t{reasons[reason]}")
    print(f"ABORTED\t{aborted}")
    print()
    for metric in outcomes[0].metrics:
        print(f"{metric}\t{numpy.mean([o.metrics[metric] for o in outcomes])}")


def main(args):
    parser = argparse.ArgumentParser(
        description="Simulate games of Hanabi between bots and report score statistics"
    )
    parser.add_argument(
        "players",
        nargs="*",
        default=["infogiver"] * 5,
        help=f"2 to 5 player types out of: {', '.join(player_types)}, infogiver-nofinesse",
    )
    parser.add_argument("-n", "--games", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=1, help="seed of the first game")
    parser.add_argument(
        "--log", metavar="FILE", help="append a transcript of every game to FILE"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="narrate every game to stdout"
    )
    parser.add_argument(
        "--trial",
        action="store_true",
        help="compare the bot with and without the finesse convention",
    )
    opts = parser.parse_args(args)
    if not (2 <= len(opts.players) <= 5):
        parser.error("between 2 and 5 players are needed")

    out: Any = sys.stdout if opts.verbose else NullStream()
    transcript = Log(opts.log) if opts.log else None

    if opts.trial:
        num_players = len(opts.players)
        treatments = [
            ["infogiver"] * num_players,
            ["infogiver-nofinesse"] * num_players,
        ]
        for t in treatments:
            print(t)
            outcomes, aborted = run_games(t, opts.games, opts.seed, out, transcript)
            print_stats(outcomes, aborted)
            print()
        return

    for p in opts.players:
        if p not in player_types and p != "infogiver-nofinesse":
            parser.error(f"Unknown player type: {p}")

    outcomes, aborted = run_games(opts.players, opts.games, opts.seed, out, transcript)
    print_stats(outcomes, aborted)


if __name__ == "__main__":
    main(sys.argv[1:])
