import pytest

from hanabi import main, make_player, run_games
from players import InfoGiverPlayer


def test_make_player():
    p = make_player("infogiver-nofinesse", 2)
    assert isinstance(p, InfoGiverPlayer)
    assert not p.use_finesse
    assert p.pnr == 2

    with pytest.raises(ValueError):
        make_player("psychic", 0)


def test_run_games():
    outcomes, aborted = run_games(["infogiver", "dummy", "random"], 3, seed=7)
    assert aborted == 0
    assert len(outcomes) == 3
    assert run_games(["infogiver", "dummy", "random"], 3, seed=7)[0] == outcomes


def test_main_prints_stats(capsys):
    main(["dummy", "dummy", "-n", "4"])
    out = capsys.readouterr().out
    assert out.startswith("GAMES\t4")
    assert "FUSES\t4" in out
    assert "ABORTED\t0" in out


def test_main_trial(capsys):
    main(["infogiver", "infogiver", "-n", "2", "--trial"])
    out = capsys.readouterr().out
    assert out.count("GAMES\t2") == 2


@pytest.mark.parametrize("players", [["dummy"], ["dummy"] * 6, ["dummy", "psychic"]])
def test_main_rejects_bad_players(players):
    with pytest.raises(SystemExit):
        main(players)
