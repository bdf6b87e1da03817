import random

import pytest

from draft_logs.memory import MemoryLogger
from draft_server.game.engine import DraftEngine
from draft_server.game.errors import SignatureDeclinedError
from draft_server.game.notifier import Notifier
from draft_server.game.reveal import RevealProtocol, Signer, SigningContext
from draft_server.game.stats import StatsStore
from draft_server.game.timers import ManualScheduler


class FakeSigner(Signer):
    """Signs (or refuses) without any wallet, and remembers what it was asked."""

    def __init__(self, address="0xabc", connected=True, decline=False, fault=None):
        self._address = address
        self._connected = connected
        self.decline = decline
        self.fault = fault
        self.messages = []

    @property
    def is_connected(self):
        return self._connected

    @property
    def address(self):
        return self._address

    async def sign_message(self, text):
        self.messages.append(text)
        if self.fault:
            raise self.fault
        if self.decline:
            raise SignatureDeclinedError()
        return "0xsigned"


class ScriptedRandom(random.Random):
    """A Random whose coin flips come from a script; draws stay seeded.

    Random only routes randrange through getrandbits when a subclass
    overrides getrandbits too, so it is redefined here. Otherwise opponent
    draws would consume the scripted flips.
    """

    def __init__(self, flips=(), seed=7):
        super().__init__(seed)
        self.flips = list(flips)

    def getrandbits(self, k):
        return super().getrandbits(k)

    def random(self):
        if self.flips:
            return self.flips.pop(0)
        return super().random()


SIGNING_CONTEXT = SigningContext(
    public_key="0xfeed",
    contract_address="0xc0ffee",
    chain_id=11155111,
    start_timestamp=1700000000,
    duration_days=30,
)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def stats_store():
    return StatsStore()


@pytest.fixture
def logger():
    return MemoryLogger()


@pytest.fixture
def results_log():
    return MemoryLogger(log_type="results")


@pytest.fixture
def make_engine(stats_store, scheduler, logger, results_log):
    def _make(rng=None, **kwargs):
        return DraftEngine(
            stats=kwargs.pop("stats", stats_store),
            rng=rng or ScriptedRandom(),
            scheduler=scheduler,
            notifier=Notifier(scheduler),
            reveal_protocol=RevealProtocol(SIGNING_CONTEXT, logger=logger),
            logger=logger,
            results_log=results_log,
            **kwargs
        )
    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()


def draft_full_deck(engine, card_ids=("1", "2", "3", "4", "5")):
    engine.enter_pick_phase()
    for card_id in card_ids:
        engine.pick_card(card_id)
