import hashlib
import json
import os
import time

import requests
import websocket

from draft_client.utils.animations import animate_battle, print_battle_result
from draft_client.utils.pretty_display import (
    format_card,
    print_border,
    print_deck,
    print_error,
    print_info,
    print_startup_message,
)

DEFAULT_SERVER_URL = os.getenv("DRAFT_SERVER_URL", "http://127.0.0.1:8000")


def sign_locally(message: str, address: str) -> str:
    """Stand-in wallet signature: a digest of the message and the address."""
    digest = hashlib.sha256(f"{address}\n{message}".encode("utf-8")).hexdigest()
    return f"0x{digest}"


class DraftClient:
    def __init__(self, base_url: str, session: requests.Session = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.address = None

    def _get(self, path: str, **params):
        response = self.session.get(f"{self.base_url}{path}", params=params or None)
        return response.json()

    def _post(self, path: str, payload: dict = None):
        response = self.session.post(f"{self.base_url}{path}", json=payload)
        return response.json()

    def connect_wallet(self, address: str):
        response = self._post("/wallet/connect", {"address": address})
        if response.get("connected"):
            self.address = address
        return response

    def disconnect_wallet(self):
        self.address = None
        return self._post("/wallet/disconnect")

    def list_cards(self, search: str = None, card_type: str = None):
        params = {}
        if search:
            params["search"] = search
        if card_type and card_type != "all":
            params["card_type"] = card_type
        return self._get("/cards", **params)

    def ban_card(self, card_id: str):
        return self._post("/draft/ban", {"card_id": card_id})

    def enter_pick_phase(self):
        return self._post("/draft/pick-phase")

    def pick_card(self, card_id: str):
        return self._post("/draft/pick", {"card_id": card_id})

    def start_battle(self):
        return self._post("/draft/battle")

    def reset_game(self):
        return self._post("/draft/reset")

    def get_state(self):
        return self._get("/draft/state")

    def get_player_deck(self):
        return self._get("/draft/player-deck")

    def get_opponent_deck(self):
        return self._get("/draft/opponent-deck")

    def get_stats(self):
        return self._get("/stats")

    def get_leaderboard(self):
        return self._get("/leaderboard")

    def get_notice(self):
        return self._get("/notice")

    def check_contract(self):
        return self._get("/contract/availability")

    def wait_for_result(self, poll_interval: float = 0.5, timeout: float = 30.0):
        """Poll until the server has resolved the running battle."""
        start = time.time()
        while time.time() - start < timeout:
            state = self.get_state()
            if state.get("phase") == "result":
                return state
            time.sleep(poll_interval)
        return {"error": "Battle did not resolve in time"}

    def reveal_card(self, card_id: str):
        """Reveal over plain HTTP: fetch the session message, sign it here, submit."""
        if not self.address:
            return {"error": "Please connect wallet first", "kind": "Unauthenticated"}
        message = self._get("/reveal/message")["message"]
        return self._post(f"/cards/{card_id}/reveal", {"signature": sign_locally(message, self.address)})

    def _to_ws_url(self, http_url: str) -> str:
        if http_url.startswith('https://'):
            return 'wss://' + http_url[len('https://'):]
        if http_url.startswith('http://'):
            return 'ws://' + http_url[len('http://'):]
        return http_url

    def reveal_card_ws(self, card_id: str, approve=None, timeout: float = 60.0):
        """Reveal over the websocket.

        The server pushes a sign_request; `approve(message)` decides whether we
        sign it (defaults to asking on stdin).
        """
        approve = approve or _ask_approval
        ws = websocket.create_connection(self._to_ws_url(f"{self.base_url}/ws/reveal/{card_id}"), timeout=timeout)
        try:
            while True:
                data = json.loads(ws.recv())
                if data.get("type") == "sign_request":
                    if approve(data["message"]):
                        ws.send(json.dumps({"type": "signature",
                                            "signature": sign_locally(data["message"], self.address or "")}))
                    else:
                        ws.send(json.dumps({"type": "decline"}))
                    continue
                return data
        finally:
            ws.close()


def _ask_approval(message: str) -> bool:
    print_border()
    print("Signature request:")
    print(message[:120] + ("..." if len(message) > 120 else ""))
    print_border()
    return input("Sign this message? (y/n): ").strip().lower() == "y"


def _print_response(response: dict):
    if "error" in response:
        print_error(response["error"])
    elif "message" in response:
        print_info(response["message"])


def play_battle(client: DraftClient):
    response = client.start_battle()
    if "error" in response:
        print_error(response["error"])
        return
    animate_battle(seconds=response.get("resolves_in", 3.0))
    state = client.wait_for_result()
    if "error" in state:
        print_error(state["error"])
        return
    opponent = client.get_opponent_deck()
    print_battle_result(state.get("last_outcome") == "win", opponent.get("cards", []))
    stats = client.get_stats()
    print_info(f"Record: {stats['wins']}W/{stats['losses']}L ({stats['win_rate']}%)")


def main():
    client = DraftClient(DEFAULT_SERVER_URL)
    print_startup_message(client.base_url)

    address = input("Wallet address (blank to stay disconnected): ").strip()
    if address:
        _print_response(client.connect_wallet(address))

    while True:
        state = client.get_state()
        print_border()
        print(f"Phase: {state['phase'].upper()} | banned {state['banned_count']} "
              f"| picked {state['picked_count']}/{state['deck_size']}")
        print("1. Show card pool")
        print("2. Ban a card")
        print("3. Enter pick phase")
        print("4. Pick a card")
        print("5. Start battle")
        print("6. Decrypt a card")
        print("7. Show my deck")
        print("8. Stats & leaderboard")
        print("9. Play again")
        print("10. Check contract")
        print("0. Quit")
        print_border()

        match input("Enter choice: ").strip():
            case '1':
                search = input("Search (blank for all): ").strip() or None
                card_type = input("Type filter (blank for all): ").strip() or None
                response = client.list_cards(search, card_type)
                if "error" in response:
                    print_error(response["error"])
                    continue
                for card in response["cards"]:
                    print(format_card(card))
            case '2':
                _print_response(client.ban_card(input("Card id to ban: ").strip()))
            case '3':
                _print_response(client.enter_pick_phase())
            case '4':
                _print_response(client.pick_card(input("Card id to pick: ").strip()))
            case '5':
                play_battle(client)
            case '6':
                response = client.reveal_card_ws(input("Card id to decrypt: ").strip())
                if response.get("type") == "revealed":
                    print_info(format_card(response["card"]))
                else:
                    print_error(response.get("error", "Decryption failed"))
            case '7':
                print_deck("Your Deck", client.get_player_deck())
            case '8':
                stats = client.get_stats()
                print_info(f"Wins {stats['wins']} | Losses {stats['losses']} | Win rate {stats['win_rate']}%")
                for rank, player in enumerate(client.get_leaderboard()["players"], start=1):
                    print(f"  #{rank} {player['name']:<16} {player['win_rate']}% "
                          f"{player['wins']}W/{player['losses']}L")
            case '9':
                _print_response(client.reset_game())
            case '10':
                response = client.check_contract()
                notice = response.get("notice", {})
                print_info(notice.get("message") or str(response))
            case '0':
                print("Goodbye!")
                return
            case _:
                print("Invalid choice.")


if __name__ == "__main__":
    main()
