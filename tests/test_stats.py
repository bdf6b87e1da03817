from draft_server.game.stats import SEEDED_LEADERBOARD, PlayerStats, StatsStore, build_leaderboard, compute_win_rate


def test_starts_empty():
    assert StatsStore().snapshot() == PlayerStats(0, 0, 0)


def test_win_then_loss():
    store = StatsStore()
    assert store.record_outcome(True) == PlayerStats(wins=1, losses=0, win_rate=100)
    assert store.record_outcome(False) == PlayerStats(wins=1, losses=1, win_rate=50)


def test_win_rate_rounds():
    assert compute_win_rate(0, 0) == 0
    assert compute_win_rate(1, 2) == 33
    assert compute_win_rate(2, 1) == 67
    assert compute_win_rate(12, 8) == 60


def test_win_rate_half_rounds_up():
    assert compute_win_rate(1, 7) == 13
    assert compute_win_rate(5, 3) == 63
    assert StatsStore(wins=1, losses=7).snapshot().win_rate == 13


def test_snapshot_is_a_copy():
    store = StatsStore()
    before = store.snapshot()
    store.record_outcome(True)
    assert before.wins == 0


def test_leaderboard_hides_player_without_games():
    board = build_leaderboard(PlayerStats())
    assert len(board) == len(SEEDED_LEADERBOARD)
    assert board[0].name == "CryptoMaster"


def test_leaderboard_ranks_local_player():
    board = build_leaderboard(PlayerStats(wins=9, losses=1, win_rate=90), address="0xme")
    assert board[0].name == "You"
    assert board[0].address == "0xme"
    assert [e.win_rate for e in board] == sorted((e.win_rate for e in board), reverse=True)
