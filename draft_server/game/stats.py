# win/loss tracking.
# One StatsStore lives for the whole process and is handed to every engine, so
# it keeps counting across resets. The engine is responsible for calling
# record_outcome exactly once per battle.
import math
import threading
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class PlayerStats:
    wins: int = 0
    losses: int = 0
    win_rate: int = 0

    @property
    def games(self) -> int:
        return self.wins + self.losses


def compute_win_rate(wins: int, losses: int) -> int:
    total = wins + losses
    if total == 0:
        return 0
    # halves round up, not to even
    return math.floor(100 * wins / total + 0.5)


class StatsStore:
    def __init__(self, wins: int = 0, losses: int = 0):
        self._lock = threading.Lock()
        self._wins = wins
        self._losses = losses

    def record_outcome(self, won: bool) -> PlayerStats:
        with self._lock:
            if won:
                self._wins += 1
            else:
                self._losses += 1
            return self._snapshot()

    def snapshot(self) -> PlayerStats:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> PlayerStats:
        return PlayerStats(self._wins, self._losses, compute_win_rate(self._wins, self._losses))


@dataclass(frozen=True)
class LeaderboardEntry:
    address: str
    name: str
    wins: int
    losses: int
    win_rate: int


# Sample standings shown next to the local player.
SEEDED_LEADERBOARD: List[LeaderboardEntry] = [
    LeaderboardEntry("0x1234...abcd", "CryptoMaster", 42, 8, 84),
    LeaderboardEntry("0x5678...efgh", "FHEKing", 38, 12, 76),
    LeaderboardEntry("0x90ab...cdef", "ZamaWarrior", 35, 15, 70),
    LeaderboardEntry("0x3456...7890", "BlockchainNinja", 30, 20, 60),
    LeaderboardEntry("0x7890...1234", "DeckBuilderPro", 28, 22, 56),
]


def build_leaderboard(stats: PlayerStats, address: str = None, name: str = "You") -> List[LeaderboardEntry]:
    """Merge the local player's live stats into the seeded standings.

    The local player is only listed once they have played a game. Ordered by
    win rate, then wins.
    """
    entries = list(SEEDED_LEADERBOARD)
    if stats.games:
        entries.append(LeaderboardEntry(address or "local", name, stats.wins, stats.losses, stats.win_rate))
    return sorted(entries, key=lambda e: (e.win_rate, e.wins), reverse=True)
