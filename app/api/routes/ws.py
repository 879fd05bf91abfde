# app/api/routes/ws.py
import json
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool

from app.core.errors import AdminRequired, GameError, InvalidInput
from app.core.logger import logger
from app.core.security import verify_admin_token
from app.services.broadcast_service import BroadcastGateway, ObserverRole
from app.services.game_service import GameService

router = APIRouter(tags=["실시간"])

Handler = Callable[[WebSocket, Dict[str, Any]], Awaitable[None]]

def _service(websocket: WebSocket) -> GameService:
    return websocket.app.state.game_service

def _gateway(websocket: WebSocket) -> BroadcastGateway:
    return websocket.app.state.gateway

def _require_admin(websocket: WebSocket) -> None:
    observer = _gateway(websocket).observer(websocket)
    if observer is None or observer.role != ObserverRole.ADMIN:
        raise AdminRequired()

# ===== 이벤트 핸들러 =====

async def handle_get_state(websocket: WebSocket, data: Dict[str, Any]) -> None:
    gateway = _gateway(websocket)
    observer = gateway.observer(websocket)
    voter_id = data.get("voter_id") or (observer.voter_id if observer else None)

    state = await run_in_threadpool(_service(websocket).public_state, voter_id)
    await gateway.send(websocket, "game_state", state.model_dump(mode="json"))

async def handle_user_login(websocket: WebSocket, data: Dict[str, Any]) -> None:
    voter_id = data.get("voter_id")
    if not isinstance(voter_id, str) or not voter_id.strip():
        raise InvalidInput("voter_id 값이 비어 있습니다")

    await _gateway(websocket).identify(websocket, voter_id.strip())

async def handle_admin_connect(websocket: WebSocket, data: Dict[str, Any]) -> None:
    token = data.get("token")
    if not verify_admin_token(websocket.app.state.admin_token, token if isinstance(token, str) else None):
        logger.warning("관리자 인증 실패 (WS)")
        raise AdminRequired()

    await _gateway(websocket).promote_admin(websocket)

async def handle_submit_vote(websocket: WebSocket, data: Dict[str, Any]) -> None:
    gateway = _gateway(websocket)
    observer = gateway.observer(websocket)
    voter_id = data.get("voter_id") or (observer.voter_id if observer else None)

    try:
        ballot = await run_in_threadpool(
            _service(websocket).cast_vote, voter_id, data.get("mr_name"), data.get("mrs_name")
        )
    except GameError as e:
        # 투표 실패는 요청자에게만
        await gateway.send(websocket, "vote_rejected", e.to_dict())
        return

    await gateway.send(websocket, "vote_accepted", ballot.model_dump())
    await gateway.broadcast_state()

async def handle_start_game(websocket: WebSocket, data: Dict[str, Any]) -> None:
    _require_admin(websocket)
    gateway = _gateway(websocket)

    start_time = await run_in_threadpool(_service(websocket).start)
    await gateway.send(websocket, "game_started", {"start_time": start_time})
    await gateway.broadcast_state()

async def handle_reset_game(websocket: WebSocket, data: Dict[str, Any]) -> None:
    _require_admin(websocket)

    await run_in_threadpool(_service(websocket).reset)
    await _gateway(websocket).broadcast_reset()

async def handle_get_results(websocket: WebSocket, data: Dict[str, Any]) -> None:
    results = await run_in_threadpool(_service(websocket).results)
    await _gateway(websocket).send(websocket, "results_ready", results.model_dump())

HANDLERS: Dict[str, Handler] = {
    "get_state": handle_get_state,
    "user_login": handle_user_login,
    "admin_connect": handle_admin_connect,
    "submit_vote": handle_submit_vote,
    "start_game": handle_start_game,
    "reset_game": handle_reset_game,
    "get_results": handle_get_results,
}

# ===== 엔드포인트 =====

async def dispatch(websocket: WebSocket, raw: Optional[str]) -> None:
    """메시지 한 개 처리 (오류는 요청자에게만 전송)"""
    gateway = _gateway(websocket)

    if raw is None:
        await gateway.send(websocket, "error", {"code": "InvalidMessage", "detail": "텍스트 프레임만 지원합니다", "request": None})
        return

    try:
        message = json.loads(raw)
    except ValueError:
        await gateway.send(websocket, "error", {"code": "InvalidMessage", "detail": "JSON 형식이 아닙니다", "request": None})
        return

    if not isinstance(message, dict) or not isinstance(message.get("event"), str):
        await gateway.send(websocket, "error", {"code": "InvalidMessage", "detail": "event 필드가 필요합니다", "request": None})
        return

    event = message["event"]
    data = message.get("data")
    if not isinstance(data, dict):
        data = {}

    handler = HANDLERS.get(event)
    if handler is None:
        await gateway.send(websocket, "error", {"code": "UnknownEvent", "detail": f"알 수 없는 이벤트: {event}", "request": event})
        return

    try:
        await handler(websocket, data)
    except GameError as e:
        logger.info(f"WS 요청 거절 [{event}]: {e.code}")
        await gateway.send(websocket, "error", {**e.to_dict(), "request": event})

@router.websocket("/ws")
async def game_socket(websocket: WebSocket):
    """실시간 상태 구독 + 요청 처리"""
    gateway = _gateway(websocket)
    await gateway.connect(websocket)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            # 바이너리 프레임은 text가 없음
            raw = message.get("text")
            await dispatch(websocket, raw)
    except WebSocketDisconnect as e:
        logger.debug(f"WS 연결 끊김 (code={e.code})")
    finally:
        await gateway.disconnect(websocket)
