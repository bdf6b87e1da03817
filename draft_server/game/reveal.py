# signature-gated reveal.
# A card's stats can only be decoded after the connected wallet signs the
# session message. The message authenticates the session, not the card, so it
# is the same for every reveal until the signing context is rebuilt.
import asyncio
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from draft_server.card_utils.card import Card
from draft_server.game.errors import SignatureDeclinedError, UnauthenticatedError

MESSAGE_FIELDS = ("publickey", "contractAddresses", "contractsChainId", "startTimestamp", "durationDays")

DEFAULT_DURATION_DAYS = 30


class Signer(ABC):
    """The wallet side of a reveal: whoever can approve or decline a signature."""

    @property
    @abstractmethod
    def is_connected(self) -> bool: ...

    @property
    @abstractmethod
    def address(self) -> Optional[str]: ...

    @abstractmethod
    async def sign_message(self, text: str) -> str: ...


class ContractReader(ABC):
    @abstractmethod
    async def get_address(self) -> str: ...

    @abstractmethod
    async def is_available(self) -> bool: ...


class ChainContext(ABC):
    @abstractmethod
    async def chain_id(self) -> int: ...


class StaticContractReader(ContractReader):
    def __init__(self, address: str = "", available: bool = True):
        self.address = address
        self.available = available

    async def get_address(self):
        return self.address

    async def is_available(self):
        return self.available


class StaticChainContext(ChainContext):
    def __init__(self, chain_id: int = 0):
        self._chain_id = chain_id

    async def chain_id(self):
        return self._chain_id


def generate_public_key() -> str:
    """A throwaway 2000-hex-digit session key."""
    return "0x" + secrets.token_hex(1000)


@dataclass(frozen=True)
class SigningContext:
    public_key: str
    contract_address: str = ""
    chain_id: int = 0
    start_timestamp: int = 0
    duration_days: int = DEFAULT_DURATION_DAYS

    def message(self) -> str:
        values = (self.public_key, self.contract_address, self.chain_id,
                  self.start_timestamp, self.duration_days)
        return "\n".join(f"{field}:{value}" for field, value in zip(MESSAGE_FIELDS, values))


async def build_signing_context(contract: Optional[ContractReader] = None,
                                chain: Optional[ChainContext] = None,
                                duration_days: int = DEFAULT_DURATION_DAYS,
                                logger=None) -> SigningContext:
    """Collect the session fields. Collaborator failures fall back to defaults."""
    address = ""
    if contract is not None:
        try:
            address = await contract.get_address()
        except Exception as e:
            if logger:
                logger.warning("signing_context_contract_unavailable", error=str(e))

    chain_id = 0
    if chain is not None:
        try:
            chain_id = int(await chain.chain_id())
        except Exception as e:
            if logger:
                logger.warning("signing_context_chain_unavailable", error=str(e))

    return SigningContext(
        public_key=generate_public_key(),
        contract_address=address or "",
        chain_id=chain_id,
        start_timestamp=int(time.time()),
        duration_days=duration_days,
    )


class RevealProtocol:
    def __init__(self, context: SigningContext, decrypt_delay: float = 0.0, logger=None):
        self.context = context
        self.decrypt_delay = decrypt_delay
        self.logger = logger

    async def reveal(self, card: Card, signer: Optional[Signer]) -> Card:
        """Ask `signer` to sign the session message, then decode `card`.

        Cancelling the awaiting task propagates as CancelledError and exposes
        nothing. Returns a plaintext copy; `card` itself is not touched.
        """
        if signer is None or not signer.is_connected:
            raise UnauthenticatedError(card_id=card.id)

        message = self.context.message()
        if self.logger:
            self.logger.info("reveal_signature_requested", card_id=card.id, address=signer.address)

        try:
            signature = await signer.sign_message(message)
        except (asyncio.CancelledError, SignatureDeclinedError):
            raise
        except Exception as e:
            raise SignatureDeclinedError(f"Signing failed: {e}", card_id=card.id) from e

        if not signature:
            raise SignatureDeclinedError(card_id=card.id)

        if self.decrypt_delay:
            await asyncio.sleep(self.decrypt_delay)

        revealed = card.revealed()
        if self.logger:
            self.logger.info("reveal_completed", card_id=card.id, address=signer.address)
        return revealed
