# card catalog.
# The fixed draftable card set. A new pool is sealed from these entries every
# time a draft session starts or resets.
import json
from pathlib import Path
from typing import Dict, List, Optional

from draft_server.card_utils.card import Card, CardSpec, CardType

DEFAULT_CATALOG: List[CardSpec] = [
    CardSpec("1", "Encrypted Warrior", CardType.WARRIOR, 3, 5, 4),
    CardSpec("2", "Homomorphic Mage", CardType.MAGE, 4, 3, 3),
    CardSpec("3", "Zero-Knowledge Assassin", CardType.ASSASSIN, 2, 4, 2),
    CardSpec("4", "Security Guard", CardType.GUARD, 5, 2, 6),
    CardSpec("5", "Protocol Breaker", CardType.WARRIOR, 3, 4, 3),
    CardSpec("6", "Cipher Summoner", CardType.MAGE, 6, 5, 4),
    CardSpec("7", "Random Oracle", CardType.SPECIAL, 4, 3, 5),
    CardSpec("8", "Fully Homomorphic Dragon", CardType.DRAGON, 8, 8, 8),
    CardSpec("9", "Security Protocol", CardType.SPELL, 2, 0, 0),
    CardSpec("10", "Encrypted Arrow", CardType.ARCHER, 3, 4, 2),
]


def build_pool(catalog: Optional[List[CardSpec]] = None) -> Dict[str, Card]:
    """Seal every catalog entry into a fresh pool, keyed by card id, in catalog order."""
    catalog = DEFAULT_CATALOG if catalog is None else catalog
    return {spec.id: spec.seal() for spec in catalog}


def catalog_from_path(path) -> List[CardSpec]:
    """
    Load a catalog from a JSON file shaped like:
      {"catalog_name": "Core Set", "cards": [{"id": "1", "name": "...", "type": "Mage",
       "cost": 4, "attack": 3, "defense": 3}, ...]}
    """
    with open(Path(path), 'r') as f:
        data = json.load(f)

    specs = []
    seen = set()
    for entry in data.get('cards', []):
        card_id = str(entry['id'])
        if card_id in seen:
            raise ValueError(f"Duplicate card id {card_id!r} in catalog {path}")
        seen.add(card_id)

        stats = {}
        for stat in ('cost', 'attack', 'defense'):
            value = entry.get(stat, 0)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"Card {card_id!r} has invalid {stat}: {value!r}")
            stats[stat] = value

        specs.append(CardSpec(
            id=card_id,
            name=entry['name'],
            type=CardType(entry['type']),
            **stats
        ))

    if not specs:
        raise ValueError(f"Catalog {path} contains no cards")
    return specs
