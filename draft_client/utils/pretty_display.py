# pretty print display stuff

def print_info(message: str):
    print(f"[INFO]: {message}")


def print_error(message: str):
    print(f"[ERROR]: {message}")


def print_border():
    print("=" * 40)
    print()


def print_startup_message(server_url: str):
    print_border()
    print("SecretDeck - FHE Deck Building Game")
    print(f"Server: {server_url}")
    print("Ban cards, pick 5, and battle an encrypted opponent.")
    print_border()


def format_card(card: dict) -> str:
    """One-line card view. Sealed stats are shortened like the web UI did."""
    flags = []
    if card.get('is_banned'):
        flags.append("BANNED")
    if card.get('is_picked'):
        flags.append("PICKED")
    flag_text = f" ({', '.join(flags)})" if flags else ""

    if 'cost' in card:
        stats = f"cost {card['cost']} | atk {card['attack']} | def {card['defense']}"
    else:
        stats = (f"cost {card['encrypted_cost'][:8]}... | atk {card['encrypted_attack'][:8]}... "
                 f"| def {card['encrypted_defense'][:8]}...")
    return f"#{card['id']:>2} [{card['type']}] {card['name']}{flag_text} :: {stats}"


def print_deck(title: str, deck: dict):
    print_border()
    print(f"{title} ({deck.get('size', 0)}/5)")
    if deck.get('cards'):
        for card in deck['cards']:
            print(f"  [{card['type']}] {card['name']}")
    else:
        print("  Deck is empty")
    print_border()
