# app/services/broadcast_service.py
"""
실시간 브로드캐스트 (WebSocket)

- 접속자 등록/해제 (일반 참가자 / 관리자)
- 상태 변경 시 모든 접속자에게 공개 상태 전송, 관리자에게는 전체 투표 목록까지
- 게임 서비스 호출(저장소 I/O 포함)은 스레드풀에서 실행
- 1초 간격 틱 루프로 시간 만료(VOTING -> FINISHED)를 직접 감지해서 전송
- 재접속 시 이벤트 재전송 없이 현재 상태 스냅샷만 전송
"""
import asyncio
import enum
from typing import Any, Dict, List, Optional

from fastapi import WebSocket
from fastapi.concurrency import run_in_threadpool

from app.core.logger import logger
from app.models.game import GameStatus
from app.services.game_service import GameService


class ObserverRole(str, enum.Enum):
    PLAYER = "player"
    ADMIN = "admin"


class Observer:
    """접속 세션 한 개"""

    def __init__(self, websocket: WebSocket, role: ObserverRole = ObserverRole.PLAYER):
        self.websocket = websocket
        self.role = role
        self.voter_id: Optional[str] = None

    def __repr__(self):
        return f"<Observer {self.role.value} {self.voter_id or '-'}>"


def envelope(event: str, data: Any = None) -> Dict[str, Any]:
    return {"event": event, "data": data if data is not None else {}}


class BroadcastGateway:
    """접속자 관리 + 이벤트 전송"""

    def __init__(self, service: GameService):
        self._service = service
        self._observers: Dict[WebSocket, Observer] = {}
        self._lock = asyncio.Lock()
        self._last_status: GameStatus = service.refresh()

    @property
    def count(self) -> int:
        return len(self._observers)

    @property
    def admin_count(self) -> int:
        return sum(1 for o in self._observers.values() if o.role == ObserverRole.ADMIN)

    @property
    def last_status(self) -> GameStatus:
        return self._last_status

    def observer(self, websocket: WebSocket) -> Optional[Observer]:
        return self._observers.get(websocket)

    # ===== 접속 관리 =====

    async def connect(self, websocket: WebSocket) -> Observer:
        """접속 수락 후 현재 상태 전송"""
        await websocket.accept()
        observer = Observer(websocket)
        async with self._lock:
            self._observers[websocket] = observer
        logger.info(f"WS 접속 - {self.count}명 접속 중")

        state = await run_in_threadpool(self._service.public_state)
        await self._send(observer, envelope("state_changed", state.model_dump(mode="json")))
        return observer

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._observers.pop(websocket, None)
        logger.info(f"WS 접속 종료 - {self.count}명 접속 중")

    async def identify(self, websocket: WebSocket, voter_id: str) -> Observer:
        """참가자 로그인 (투표 여부 + 현재 상태 전송)"""
        observer = self._observers[websocket]
        observer.voter_id = voter_id

        state = await run_in_threadpool(self._service.public_state, voter_id)
        await self._send(observer, envelope("login_ok", {
            "voter_id": voter_id,
            "has_voted": state.has_voted,
            "state": state.model_dump(mode="json")
        }))
        return observer

    async def promote_admin(self, websocket: WebSocket) -> Observer:
        """관리자 등록 후 전체 상태 전송"""
        observer = self._observers[websocket]
        observer.role = ObserverRole.ADMIN
        logger.info(f"관리자 접속 - 관리자 {self.admin_count}명")

        state = await run_in_threadpool(self._service.admin_state)
        await self._send(observer, envelope("admin_state", state.model_dump(mode="json")))
        return observer

    # ===== 전송 =====

    async def _send(self, observer: Observer, message: Dict[str, Any]) -> bool:
        try:
            await observer.websocket.send_json(message)
            return True
        except Exception as e:
            logger.debug(f"WS 전송 실패 ({observer}): {e}")
            return False

    async def send(self, websocket: WebSocket, event: str, data: Any = None) -> None:
        """요청한 세션에만 전송"""
        observer = self._observers.get(websocket)
        if observer is None:
            return
        await self._send(observer, envelope(event, data))

    async def send_to_voter(self, voter_id: str, event: str, data: Any = None) -> int:
        """같은 투표자 ID로 로그인한 세션에만 전송"""
        async with self._lock:
            targets = [o for o in self._observers.values() if o.voter_id == voter_id]

        for observer in targets:
            await self._send(observer, envelope(event, data))
        return len(targets)

    async def broadcast(self, event: str, data: Any = None, role: Optional[ObserverRole] = None) -> None:
        """전체(또는 역할별) 전송, 끊긴 연결은 정리"""
        message = envelope(event, data)

        async with self._lock:
            targets: List[Observer] = [
                o for o in self._observers.values()
                if role is None or o.role == role
            ]

        dead = []
        for observer in targets:
            if not await self._send(observer, message):
                dead.append(observer.websocket)

        if dead:
            async with self._lock:
                for websocket in dead:
                    self._observers.pop(websocket, None)
            logger.debug(f"끊긴 WS {len(dead)}개 정리")

    async def broadcast_state(self) -> None:
        """공개 상태는 전체, 전체 투표 목록은 관리자에게만"""
        state = await run_in_threadpool(self._service.public_state)
        self._last_status = state.status
        await self.broadcast("state_changed", state.model_dump(mode="json"))

        if self.admin_count:
            admin_state = await run_in_threadpool(self._service.admin_state)
            await self.broadcast("admin_state", admin_state.model_dump(mode="json"), role=ObserverRole.ADMIN)

    async def broadcast_reset(self) -> None:
        await self.broadcast("game_reset")
        await self.broadcast_state()

    # ===== 틱 루프 =====

    async def tick(self) -> bool:
        """시간 만료 체크, 상태가 바뀌었으면 전송"""
        # 만료 시 저장소 쓰기가 있으므로 스레드풀에서
        status = await run_in_threadpool(self._service.refresh)
        if status == self._last_status:
            return False

        logger.info(f"상태 변경 감지: {self._last_status.value} -> {status.value}")
        await self.broadcast_state()
        return True

    async def run_ticker(self, interval: float) -> None:
        """백그라운드 루프 (취소될 때까지)"""
        logger.info(f"상태 점검 루프 시작 ({interval}s 간격)")
        while True:
            await asyncio.sleep(interval)
            try:
                await self.tick()
            except Exception:
                logger.exception("상태 점검 루프 오류")
