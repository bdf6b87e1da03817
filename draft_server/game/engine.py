# draft engine.
# Owns one draft session: the sealed card pool, both decks and the
# Ban -> Pick -> Battle -> Result phase machine. Every mutating call is
# all-or-nothing, runs under the session lock, and leaves a notice behind.
import functools
import random
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional

from draft_logs.loggers import draft_logger, results_logger
from draft_server.card_utils.card import Card, CardSpec, CardType
from draft_server.card_utils.catalog import build_pool
from draft_server.game.errors import (
    AlreadyResolvedError,
    DeckFullError,
    DeckIncompleteError,
    DraftError,
    UnknownCardError,
    WrongPhaseError,
)
from draft_server.game.notifier import (
    ACTION_NOTICE_SECONDS,
    ERROR,
    PENDING,
    RESULT_NOTICE_SECONDS,
    SUCCESS,
    Notifier,
)
from draft_server.game.reveal import ContractReader, RevealProtocol, Signer, SigningContext, generate_public_key
from draft_server.game.stats import PlayerStats, StatsStore
from draft_server.game.timers import AsyncioScheduler, Scheduler, TimerHandle

DECK_SIZE = 5
BATTLE_DELAY_SECONDS = 3.0


class Phase(str, Enum):
    BAN = "ban"
    PICK = "pick"
    BATTLE = "battle"
    RESULT = "result"


@dataclass(frozen=True)
class BattleOutcome:
    won: bool
    stats: PlayerStats


def _notifies_errors(action: str):
    """Turn a rejected DraftError into a warning log and an error notice, then re-raise."""
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except DraftError as e:
                self.logger.warning(f"{action}_rejected", kind=e.kind, reason=e.message, **e.context)
                self.notifier.notify(ERROR, e.message, dismiss_after=ACTION_NOTICE_SECONDS)
                raise
        return wrapper
    return decorator


class DraftEngine:
    def __init__(
        self,
        stats: StatsStore,
        catalog: Optional[List[CardSpec]] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
        notifier: Optional[Notifier] = None,
        reveal_protocol: Optional[RevealProtocol] = None,
        battle_delay: float = BATTLE_DELAY_SECONDS,
        logger=draft_logger,
        results_log=results_logger,
    ):
        self.stats = stats
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.logger = logger
        self.results_log = results_log
        self.scheduler = scheduler or AsyncioScheduler(logger=logger)
        self.notifier = notifier or Notifier(self.scheduler)
        self.reveal_protocol = reveal_protocol or RevealProtocol(SigningContext(generate_public_key()), logger=logger)
        self.battle_delay = battle_delay

        self._lock = threading.Lock()
        self._battle_handle: Optional[TimerHandle] = None
        self._new_session()

    def _new_session(self):
        self.phase = Phase.BAN
        self.pool: Dict[str, Card] = build_pool(self.catalog)
        self.player_deck: List[Card] = []
        self.opponent_deck: List[Card] = []
        self.last_outcome: Optional[BattleOutcome] = None

    # ----- queries -----

    def get_phase(self) -> Phase:
        return self.phase

    def get_player_deck(self) -> List[Card]:
        return [replace(c) for c in self.player_deck]

    def get_opponent_deck(self) -> List[Card]:
        return [replace(c) for c in self.opponent_deck]

    def get_stats(self) -> PlayerStats:
        return self.stats.snapshot()

    def get_card(self, card_id: str) -> Card:
        card = self.pool.get(card_id)
        if card is None:
            raise UnknownCardError(f"No card with id {card_id}", card_id=card_id)
        return replace(card)

    def get_pool(self, search: Optional[str] = None, card_type: Optional[str] = None) -> List[Card]:
        """Pool cards in catalog order, filtered by name substring and type."""
        wanted_type = None
        if card_type and card_type != "all":
            wanted_type = CardType(card_type)
        needle = (search or "").lower()

        result = []
        for card in self.pool.values():
            if needle and needle not in card.name.lower():
                continue
            if wanted_type is not None and card.type != wanted_type:
                continue
            result.append(replace(card))
        return result

    def draft_summary(self) -> dict:
        return {
            "phase": self.phase.value,
            "banned_count": sum(1 for c in self.pool.values() if c.is_banned),
            "picked_count": len(self.player_deck),
            "deck_size": DECK_SIZE,
            "battle_pending": self._battle_handle is not None and self._battle_handle.active,
            "last_outcome": None if self.last_outcome is None else ("win" if self.last_outcome.won else "loss"),
        }

    # ----- mutations -----

    def _require_phase(self, phase: Phase, action: str):
        if self.phase != phase:
            raise WrongPhaseError(
                f"Cannot {action} during the {self.phase.value} phase",
                phase=self.phase.value,
            )

    def _unresolved_card(self, card_id: str) -> Card:
        card = self.pool.get(card_id)
        if card is None:
            raise UnknownCardError(f"No card with id {card_id}", card_id=card_id)
        if card.is_resolved:
            raise AlreadyResolvedError(f"{card.name} is already banned or picked", card_id=card_id)
        return card

    @_notifies_errors("ban")
    def ban_card(self, card_id: str) -> Card:
        with self._lock:
            self._require_phase(Phase.BAN, "ban cards")
            card = self._unresolved_card(card_id)
            card.is_banned = True

        self.logger.info("card_banned", card_id=card_id, name=card.name)
        self.notifier.notify(SUCCESS, "Card banned successfully!", dismiss_after=ACTION_NOTICE_SECONDS)
        return replace(card)

    @_notifies_errors("enter_pick")
    def enter_pick_phase(self) -> Phase:
        with self._lock:
            self._require_phase(Phase.BAN, "enter the pick phase")
            self.phase = Phase.PICK
            banned = sum(1 for c in self.pool.values() if c.is_banned)

        self.logger.info("pick_phase_entered", banned_count=banned)
        self.notifier.notify(SUCCESS, "Pick phase started!", dismiss_after=ACTION_NOTICE_SECONDS)
        return self.phase

    @_notifies_errors("pick")
    def pick_card(self, card_id: str) -> Card:
        with self._lock:
            self._require_phase(Phase.PICK, "pick cards")
            card = self._unresolved_card(card_id)
            if len(self.player_deck) >= DECK_SIZE:
                raise DeckFullError(card_id=card_id, deck_size=len(self.player_deck))

            picked = card.picked_copy()
            self.player_deck.append(picked)
            card.is_picked = True
            deck_size = len(self.player_deck)

        self.logger.info("card_picked", card_id=card_id, name=card.name, deck_size=deck_size)
        self.notifier.notify(SUCCESS, "Card added to your deck!", dismiss_after=ACTION_NOTICE_SECONDS)
        return replace(picked)

    def sample_opponent_deck(self) -> List[Card]:
        """Draw up to DECK_SIZE distinct unresolved pool cards, without replacement.

        Returns picked copies; the pool itself is not touched.
        """
        candidates = [c for c in self.pool.values() if not c.is_resolved]
        drawn = []
        while candidates and len(drawn) < DECK_SIZE:
            index = self.rng.randrange(len(candidates))
            drawn.append(candidates.pop(index).picked_copy())
        return drawn

    @_notifies_errors("start_battle")
    def start_battle(self) -> TimerHandle:
        with self._lock:
            self._require_phase(Phase.PICK, "start a battle")
            if len(self.player_deck) != DECK_SIZE:
                raise DeckIncompleteError(deck_size=len(self.player_deck))

            opponent = self.sample_opponent_deck()
            handle = self.scheduler.call_later(self.battle_delay, self._on_battle_timer)

            self.opponent_deck = opponent
            self.phase = Phase.BATTLE
            self._battle_handle = handle

        self.logger.info(
            "battle_started",
            player_deck=[c.id for c in self.player_deck],
            opponent_deck=[c.id for c in opponent],
            delay=self.battle_delay
        )
        self.notifier.notify(PENDING, "Battle in progress...")
        return handle

    def _on_battle_timer(self):
        # the firing timer must not cancel itself
        with self._lock:
            self._battle_handle = None
        self.resolve_battle()

    @_notifies_errors("resolve_battle")
    def resolve_battle(self) -> BattleOutcome:
        """Flip the coin, record the result once and move to the result phase."""
        with self._lock:
            self._require_phase(Phase.BATTLE, "resolve a battle")
            won = self.rng.random() > 0.5
            stats = self.stats.record_outcome(won)
            self.phase = Phase.RESULT
            if self._battle_handle is not None:
                self._battle_handle.cancel()
                self._battle_handle = None
            self.last_outcome = BattleOutcome(won=won, stats=stats)

        self.results_log.info(
            "battle_resolved",
            won=won,
            wins=stats.wins,
            losses=stats.losses,
            win_rate=stats.win_rate,
            opponent_deck=[c.id for c in self.opponent_deck]
        )
        if won:
            self.notifier.notify(SUCCESS, "Congratulations! You won!", dismiss_after=RESULT_NOTICE_SECONDS)
        else:
            self.notifier.notify(ERROR, "Sorry, you lost this battle!", dismiss_after=RESULT_NOTICE_SECONDS)
        return self.last_outcome

    def reset_game(self) -> Phase:
        """Throw the session away and start a new one in the ban phase. Stats are kept."""
        with self._lock:
            previous = self.phase
            if self._battle_handle is not None:
                self._battle_handle.cancel()
                self._battle_handle = None
            self._new_session()

        self.logger.info("game_reset", previous_phase=previous.value)
        self.notifier.notify(SUCCESS, "New draft started!", dismiss_after=ACTION_NOTICE_SECONDS)
        return self.phase

    # ----- reveal & collaborators -----

    async def reveal(self, card_id: str, signer: Optional[Signer]) -> Card:
        """Decode one pool card for the signer. Works in any phase; nothing is cached."""
        try:
            card = self.get_card(card_id)
            revealed = await self.reveal_protocol.reveal(card, signer)
        except DraftError as e:
            self.logger.warning("reveal_rejected", kind=e.kind, reason=e.message, card_id=card_id)
            self.notifier.notify(ERROR, e.message, dismiss_after=ACTION_NOTICE_SECONDS)
            raise

        self.notifier.notify(SUCCESS, f"{revealed.name} decrypted", dismiss_after=ACTION_NOTICE_SECONDS)
        return revealed

    async def check_contract_availability(self, contract: ContractReader) -> bool:
        """Manual availability check; failures only show up as an error notice."""
        try:
            available = await contract.is_available()
        except Exception as e:
            self.logger.warning("contract_check_failed", error=str(e))
            self.notifier.notify(ERROR, "Error checking contract availability", dismiss_after=RESULT_NOTICE_SECONDS)
            return False

        if available:
            self.notifier.notify(SUCCESS, "ZAMA FHE contract is available!", dismiss_after=RESULT_NOTICE_SECONDS)
        else:
            self.notifier.notify(ERROR, "Contract not available", dismiss_after=RESULT_NOTICE_SECONDS)
        return bool(available)
