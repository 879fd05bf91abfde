# app/services/game_record.py
import time
import uuid
from typing import Iterable, Optional

from app.models.game import GameStatus, DEFAULT_DURATION_MS
from app.schemas.game import Ballot
from app.services.vote_ledger import VoteLedger

def now_ms() -> int:
    """서버 기준 현재 시각 (epoch ms)"""
    return int(time.time() * 1000)

def effective_status(
    status: GameStatus,
    start_time: Optional[int],
    duration_ms: int,
    now: int
) -> GameStatus:
    """시간 경과를 반영한 실제 상태 (VOTING이고 시간이 다 됐으면 FINISHED)"""
    if status == GameStatus.VOTING and start_time is not None:
        if now - start_time >= duration_ms:
            return GameStatus.FINISHED
    return status

class GameRecord:
    """게임 단일 레코드 (상태 + 시작 시각 + 진행 시간 + 투표 장부)"""

    def __init__(
        self,
        duration_ms: int = DEFAULT_DURATION_MS,
        status: GameStatus = GameStatus.IDLE,
        start_time: Optional[int] = None,
        ballots: Iterable[Ballot] = (),
        id: Optional[str] = None
    ):
        self.id = id or str(uuid.uuid4())
        self.status = GameStatus(status)
        self.start_time = start_time
        self.duration_ms = duration_ms
        self.ledger = VoteLedger(ballots)

    def effective_status(self, now: int) -> GameStatus:
        return effective_status(self.status, self.start_time, self.duration_ms, now)

    def promote(self, now: int) -> bool:
        """시간 만료 시 저장된 상태를 FINISHED로 갱신, 변경 여부 반환"""
        status = self.effective_status(now)
        if status == self.status:
            return False
        self.status = status
        return True

    def __repr__(self):
        return f"<GameRecord {self.id} - {self.status.value} ({len(self.ledger)} votes)>"
