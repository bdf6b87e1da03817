# wallet-side signers for the server.
# The browser wallet is the only thing that can sign, so the server either
# receives the signature in the request body or asks for it over a websocket.
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect

from draft_server.game.errors import SignatureDeclinedError
from draft_server.game.reveal import Signer


class WalletIdentity:
    """The address the player connected with, if any."""

    def __init__(self, address: Optional[str] = None):
        self.address = address

    @property
    def is_connected(self) -> bool:
        return bool(self.address)

    def connect(self, address: str):
        self.address = address

    def disconnect(self):
        self.address = None


class SubmittedSignatureSigner(Signer):
    """Uses a signature the client already produced for the session message."""

    def __init__(self, identity: WalletIdentity, signature: Optional[str]):
        self.identity = identity
        self.signature = signature

    @property
    def is_connected(self):
        return self.identity.is_connected

    @property
    def address(self):
        return self.identity.address

    async def sign_message(self, text):
        if not self.signature:
            raise SignatureDeclinedError("No signature was submitted")
        return self.signature


class WebSocketSigner(Signer):
    """Sends a sign_request to the client and waits for its answer.

    The client replies with {"type": "signature", "signature": "..."} or
    {"type": "decline"}. Disconnecting while we wait counts as a decline.
    """

    def __init__(self, identity: WalletIdentity, websocket: WebSocket):
        self.identity = identity
        self.websocket = websocket

    @property
    def is_connected(self):
        return self.identity.is_connected

    @property
    def address(self):
        return self.identity.address

    async def sign_message(self, text):
        await self.websocket.send_json({"type": "sign_request", "message": text})
        try:
            reply = await self.websocket.receive_json()
        except WebSocketDisconnect:
            raise SignatureDeclinedError("Signature request dismissed")

        if reply.get("type") != "signature" or not reply.get("signature"):
            raise SignatureDeclinedError()
        return reply["signature"]
