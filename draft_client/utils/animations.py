import sys
from time import sleep

RED = '\033[31m'
GREEN = '\033[32m'
CYAN = '\033[36m'
MAGENTA = '\033[35m'
YELLOW = '\033[33m'
BLUE = '\033[34m'
WHITE = '\033[37m'
BOLD = '\033[1m'
RESET = '\033[0m'
CLEAR_LINE = '\033[2K'
HIDE_CURSOR = '\033[?25l'
SHOW_CURSOR = '\033[?25h'

TYPE_COLORS = {
    'Warrior': RED,
    'Mage': BLUE,
    'Assassin': MAGENTA,
    'Guard': WHITE,
    'Dragon': YELLOW,
    'Special': CYAN,
    'Spell': GREEN,
    'Archer': GREEN,
}


def colored_name(card: dict) -> str:
    color = TYPE_COLORS.get(card.get('type'), WHITE)
    return f"{color}{card['name']}{RESET}"


def clash_frame(frame: int, terminal_width=50) -> str:
    """Two decks sliding toward each other, meeting in the middle on the last frame."""
    half = terminal_width // 2
    gap = max(half - frame * 2, 1)
    left = "[YOUR DECK]"
    right = "[OPPONENT]"
    pad = max(half - len(left) - gap // 2, 0)
    return " " * pad + left + " " * gap + "VS" + " " * gap + right


def animate_battle(seconds: float = 3.0, terminal_width=50, frames=12):
    """Play the clash animation for roughly `seconds`, the time the server needs to resolve."""
    delay = seconds / frames if frames else 0
    print(HIDE_CURSOR, end='')
    try:
        for frame in range(frames):
            if frame > 0:
                sys.stdout.write('\033[1A')
            sys.stdout.write(f'{CLEAR_LINE}{clash_frame(frame, terminal_width)}\n')
            sys.stdout.flush()
            sleep(delay)
        print()
    finally:
        print(SHOW_CURSOR, end='')


def print_battle_result(won: bool, opponent_cards: list[dict]):
    if won:
        print(f"{BOLD}{GREEN}Congratulations! You won!{RESET}")
    else:
        print(f"{BOLD}{RED}Sorry, you lost this battle!{RESET}")
    print("Opponent deck:")
    for card in opponent_cards:
        print(f"  {colored_name(card)}")
