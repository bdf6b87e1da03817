from pydantic import BaseModel
from typing import List, Optional

from draft_server.card_utils.card import Card


class CardAction(BaseModel):
    card_id: str


class ConnectWallet(BaseModel):
    address: str


class RevealRequest(BaseModel):
    signature: Optional[str] = None


class SealedCard(BaseModel):
    """A card as anyone can see it: tokens only."""
    id: str
    name: str
    type: str
    encrypted_cost: str
    encrypted_attack: str
    encrypted_defense: str
    is_banned: bool
    is_picked: bool

    @classmethod
    def from_card(cls, card: Card) -> "SealedCard":
        return cls(
            id=card.id,
            name=card.name,
            type=card.type.value,
            encrypted_cost=card.encrypted_cost,
            encrypted_attack=card.encrypted_attack,
            encrypted_defense=card.encrypted_defense,
            is_banned=card.is_banned,
            is_picked=card.is_picked,
        )


class RevealedCard(SealedCard):
    cost: int
    attack: int
    defense: int

    @classmethod
    def from_card(cls, card: Card) -> "RevealedCard":
        sealed = SealedCard.from_card(card)
        return cls(**sealed.model_dump(), cost=card.cost, attack=card.attack, defense=card.defense)


class StatsResponse(BaseModel):
    wins: int
    losses: int
    win_rate: int


class DeckResponse(BaseModel):
    cards: List[SealedCard]
    size: int


class NoticeResponse(BaseModel):
    visible: bool
    status: str
    message: str
