from fastapi import FastAPI, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dataclasses import asdict
from typing import Optional

#logging stuff
from draft_logs.loggers import server_logger, draft_logger, reveal_logger
from draft_logs.endpoints import router as logs_router
from draft_logs.middleware import RequestLoggingMiddleware

from draft_server import config
from draft_server.card_utils.card import CardType
from draft_server.card_utils.catalog import catalog_from_path
from draft_server.game.engine import DraftEngine
from draft_server.game.errors import DraftError
from draft_server.game.reveal import (
    RevealProtocol,
    StaticChainContext,
    StaticContractReader,
    build_signing_context,
)
from draft_server.game.stats import StatsStore, build_leaderboard
from draft_server.game.timers import AsyncioScheduler
from draft_server.server_classes import (
    CardAction,
    ConnectWallet,
    DeckResponse,
    NoticeResponse,
    RevealedCard,
    RevealRequest,
    SealedCard,
    StatsResponse,
)
from draft_server.signers import SubmittedSignatureSigner, WalletIdentity, WebSocketSigner

app = FastAPI(title="SecretDeck Draft Server")
app.include_router(logs_router)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware, logger=server_logger)


# process-wide state: stats outlive every draft reset
stats_store = StatsStore()
identity = WalletIdentity()
contract = StaticContractReader(address=config.CONTRACT_ADDRESS, available=config.CONTRACT_AVAILABLE)
chain = StaticChainContext(chain_id=config.CHAIN_ID)


def build_engine() -> DraftEngine:
    catalog = catalog_from_path(config.CATALOG_PATH) if config.CATALOG_PATH else None
    return DraftEngine(
        stats=stats_store,
        catalog=catalog,
        scheduler=AsyncioScheduler(logger=draft_logger),
        battle_delay=config.BATTLE_DELAY_SECONDS,
        logger=draft_logger,
    )


engine = build_engine()


def _deck_response(cards) -> dict:
    return DeckResponse(cards=[SealedCard.from_card(c) for c in cards], size=len(cards)).model_dump()


@app.exception_handler(DraftError)
async def draft_error_handler(request: Request, exc: DraftError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# startup functions
@app.on_event("startup")
async def startup_event():
    context = await build_signing_context(
        contract=contract,
        chain=chain,
        duration_days=config.SESSION_DURATION_DAYS,
        logger=server_logger,
    )
    engine.reveal_protocol = RevealProtocol(context, decrypt_delay=config.REVEAL_DELAY_SECONDS, logger=reveal_logger)

    #log code
    server_logger.info(
        "startup_signing_context_ready",
        contract_address=context.contract_address,
        chain_id=context.chain_id,
        duration_days=context.duration_days
    )


@app.get("/")
async def read_root():
    return {"game": "SecretDeck", "phase": engine.get_phase().value}


@app.get("/cards")
async def list_cards(search: Optional[str] = None, card_type: Optional[str] = Query(None)):
    """The sealed card pool, optionally filtered by name and type."""
    try:
        cards = engine.get_pool(search=search, card_type=card_type)
    except ValueError:
        return JSONResponse(status_code=400, content={
            "error": f"Unknown card type. Available types: {[t.value for t in CardType]}"
        })
    return {"cards": [SealedCard.from_card(c).model_dump() for c in cards], "count": len(cards)}


@app.get("/cards/types")
async def list_card_types():
    return {"types": [t.value for t in CardType]}


@app.post("/draft/ban")
async def ban_card(req: CardAction):
    card = engine.ban_card(req.card_id)
    return JSONResponse(status_code=200, content={
        "message": "Card banned successfully!",
        "card": SealedCard.from_card(card).model_dump()
    })


@app.post("/draft/pick-phase")
async def enter_pick_phase():
    phase = engine.enter_pick_phase()
    return {"message": "Pick phase started", "phase": phase.value}


@app.post("/draft/pick")
async def pick_card(req: CardAction):
    card = engine.pick_card(req.card_id)
    deck = engine.get_player_deck()
    return JSONResponse(status_code=200, content={
        "message": "Card added to your deck!",
        "card": SealedCard.from_card(card).model_dump(),
        "deck_size": len(deck)
    })


@app.post("/draft/battle")
async def start_battle():
    engine.start_battle()
    return JSONResponse(status_code=202, content={
        "message": "Battle started",
        "phase": engine.get_phase().value,
        "resolves_in": engine.battle_delay
    })


@app.post("/draft/reset")
async def reset_game():
    phase = engine.reset_game()
    return {"message": "New draft started", "phase": phase.value}


@app.get("/draft/state")
async def draft_state():
    return {
        **engine.draft_summary(),
        "player_deck": _deck_response(engine.get_player_deck()),
        "stats": StatsResponse(**asdict(engine.get_stats())).model_dump(),
    }


@app.get("/draft/player-deck")
async def player_deck():
    return _deck_response(engine.get_player_deck())


@app.get("/draft/opponent-deck")
async def opponent_deck():
    return _deck_response(engine.get_opponent_deck())


@app.get("/stats")
async def get_stats():
    return StatsResponse(**asdict(engine.get_stats())).model_dump()


@app.get("/leaderboard")
async def get_leaderboard():
    entries = build_leaderboard(engine.get_stats(), address=identity.address)
    return {"players": [asdict(e) for e in entries]}


@app.get("/notice")
async def get_notice():
    return NoticeResponse(**engine.notifier.current().to_dict()).model_dump()


@app.post("/notice/dismiss")
async def dismiss_notice():
    return NoticeResponse(**engine.notifier.dismiss().to_dict()).model_dump()


@app.post("/wallet/connect")
async def connect_wallet(req: ConnectWallet):
    if not req.address:
        return JSONResponse(status_code=400, content={"error": "Missing wallet address"})
    identity.connect(req.address)

    #log code
    server_logger.info(
        "wallet_connected",
        address=req.address
    )
    return {"connected": True, "address": identity.address}


@app.post("/wallet/disconnect")
async def disconnect_wallet():
    #log code
    server_logger.info(
        "wallet_disconnected",
        address=identity.address
    )
    identity.disconnect()
    return {"connected": False}


@app.get("/reveal/message")
async def reveal_message():
    """The exact text a wallet has to sign before any reveal."""
    return {"message": engine.reveal_protocol.context.message()}


@app.post("/cards/{card_id}/reveal")
async def reveal_card(card_id: str, req: RevealRequest):
    signer = SubmittedSignatureSigner(identity, req.signature)
    card = await engine.reveal(card_id, signer)
    return JSONResponse(status_code=200, content={
        "message": "This card data was decrypted through wallet signature",
        "card": RevealedCard.from_card(card).model_dump()
    })


@app.websocket("/ws/reveal/{card_id}")
async def websocket_reveal(websocket: WebSocket, card_id: str):
    """Reveal over a socket: we push a sign_request and wait as long as the wallet takes."""
    await websocket.accept()

    #log code
    reveal_logger.info(
        "ws_reveal_opened",
        card_id=card_id,
        address=identity.address
    )

    signer = WebSocketSigner(identity, websocket)
    try:
        card = await engine.reveal(card_id, signer)
        payload = {"type": "revealed", "card": RevealedCard.from_card(card).model_dump()}
    except DraftError as e:
        payload = {"type": "error", **e.to_dict()}

    try:
        await websocket.send_json(payload)
        await websocket.close()
    except (WebSocketDisconnect, RuntimeError):
        #log code
        reveal_logger.info(
            "ws_reveal_client_gone",
            card_id=card_id
        )


@app.get("/contract/availability")
async def contract_availability():
    available = await engine.check_contract_availability(contract)
    return {"available": available, "notice": engine.notifier.current().to_dict()}
