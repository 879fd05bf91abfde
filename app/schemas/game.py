# app/schemas/game.py
from pydantic import BaseModel
from typing import Any, List, Optional

from app.models.game import GameStatus

class Ballot(BaseModel):
    """투표 한 건 (생성 후 변경 불가)"""
    voter_id: str
    mr_name: str
    mrs_name: str
    timestamp: int  # 서버 기준 epoch ms

    class Config:
        frozen = True
        from_attributes = True

class GameState(BaseModel):
    """공개 게임 상태 (모든 접속자에게 전송)"""
    status: GameStatus
    start_time: Optional[int] = None
    duration_ms: int
    server_time: int
    total_votes: int = 0
    has_voted: bool = False

class AdminGameState(GameState):
    """관리자용 전체 상태"""
    votes: List[Ballot] = []

class VoteRequest(BaseModel):
    """투표 요청 (타입/빈 값 검증은 서비스에서, 상태 검사가 먼저)"""
    voter_id: Optional[Any] = None
    mr_name: Optional[Any] = None
    mrs_name: Optional[Any] = None

class VoteResponse(BaseModel):
    """투표 응답"""
    message: str = "투표 완료"
    ballot: Ballot

class StartResponse(BaseModel):
    success: bool = True
    start_time: int

class ResetResponse(BaseModel):
    success: bool = True
    message: str = "게임이 초기화되었습니다"

class ResultEntry(BaseModel):
    """후보별 득표"""
    name: str
    count: int

class GameResults(BaseModel):
    """카테고리별 TOP 2 + 전체 투표 수"""
    mr: List[ResultEntry]
    mrs: List[ResultEntry]
    total_votes: int
