# server settings, all read from the environment.
import os


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


ENV = os.getenv("ENV", "dev")
LOG_DIR = os.getenv("DRAFT_LOG_DIR", "logs")

BATTLE_DELAY_SECONDS = float(os.getenv("DRAFT_BATTLE_DELAY", "3"))
REVEAL_DELAY_SECONDS = float(os.getenv("DRAFT_REVEAL_DELAY", "1.5"))
SESSION_DURATION_DAYS = int(os.getenv("DRAFT_SESSION_DAYS", "30"))

CONTRACT_ADDRESS = os.getenv("DRAFT_CONTRACT_ADDRESS", "")
CONTRACT_AVAILABLE = _flag("DRAFT_CONTRACT_AVAILABLE", "true")
CHAIN_ID = int(os.getenv("DRAFT_CHAIN_ID", "0"))

CATALOG_PATH = os.getenv("DRAFT_CATALOG_PATH") or None
