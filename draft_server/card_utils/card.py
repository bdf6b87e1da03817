# card data classes.
# `CardSpec` is a catalog entry with its plaintext stats. `Card` is what lives
# in the draft pool: it only carries the encoded tokens until a reveal
# materializes a plaintext copy of it.
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from draft_server.card_utils import codec


class CardType(str, Enum):
    WARRIOR = "Warrior"
    MAGE = "Mage"
    ASSASSIN = "Assassin"
    GUARD = "Guard"
    DRAGON = "Dragon"
    SPECIAL = "Special"
    SPELL = "Spell"
    ARCHER = "Archer"


@dataclass(frozen=True)
class CardSpec:
    id: str
    name: str
    type: CardType
    cost: int
    attack: int
    defense: int

    def seal(self) -> "Card":
        """Build a fresh pool card with encoded stats and cleared flags."""
        return Card(
            id=self.id,
            name=self.name,
            type=self.type,
            encrypted_cost=codec.encode(self.cost),
            encrypted_attack=codec.encode(self.attack),
            encrypted_defense=codec.encode(self.defense),
        )


@dataclass
class Card:
    id: str
    name: str
    type: CardType
    encrypted_cost: str
    encrypted_attack: str
    encrypted_defense: str
    is_banned: bool = False
    is_picked: bool = False
    # plaintext, only set on a revealed copy
    cost: Optional[int] = None
    attack: Optional[int] = None
    defense: Optional[int] = None

    @property
    def is_sealed(self) -> bool:
        return self.cost is None and self.attack is None and self.defense is None

    @property
    def is_resolved(self) -> bool:
        return self.is_banned or self.is_picked

    def picked_copy(self) -> "Card":
        return replace(self, is_picked=True)

    def revealed(self) -> "Card":
        """Decode all three tokens into a plaintext copy. The original stays sealed."""
        return replace(
            self,
            cost=codec.decode(self.encrypted_cost),
            attack=codec.decode(self.encrypted_attack),
            defense=codec.decode(self.encrypted_defense),
        )
