# app/api/routes/game.py
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from app.api.deps import get_game_service, get_gateway, require_admin
from app.schemas.game import (
    AdminGameState,
    GameResults,
    GameState,
    ResetResponse,
    StartResponse,
    VoteRequest,
    VoteResponse,
)
from app.services.broadcast_service import BroadcastGateway
from app.services.game_service import GameService

router = APIRouter(prefix="/api/v1/game", tags=["게임"])

@router.get("/state", response_model=GameState)
def get_game_state(
    voter_id: Optional[str] = None,
    service: GameService = Depends(get_game_service)
):
    """현재 상태 조회 (voter_id가 있으면 투표 여부 포함)"""
    return service.public_state(voter_id)

@router.get("/admin/state", response_model=AdminGameState, dependencies=[Depends(require_admin)])
def get_admin_state(service: GameService = Depends(get_game_service)):
    """관리자용 전체 상태 조회"""
    return service.admin_state()

@router.post("/start", response_model=StartResponse, dependencies=[Depends(require_admin)])
async def start_game(
    service: GameService = Depends(get_game_service),
    gateway: BroadcastGateway = Depends(get_gateway)
):
    """투표 시작 (IDLE일 때만)"""
    # 저장소 I/O는 스레드풀에서 (이벤트 루프 블로킹 방지)
    start_time = await run_in_threadpool(service.start)
    await gateway.broadcast_state()

    return StartResponse(start_time=start_time)

@router.post("/vote", response_model=VoteResponse)
async def submit_vote(
    data: VoteRequest,
    service: GameService = Depends(get_game_service),
    gateway: BroadcastGateway = Depends(get_gateway)
):
    """투표 제출"""
    ballot = await run_in_threadpool(service.cast_vote, data.voter_id, data.mr_name, data.mrs_name)

    # 같은 투표자로 접속한 WS 세션에만 확인 전송
    await gateway.send_to_voter(ballot.voter_id, "vote_accepted", ballot.model_dump())
    await gateway.broadcast_state()

    return VoteResponse(ballot=ballot)

@router.get("/results", response_model=GameResults)
def get_results(service: GameService = Depends(get_game_service)):
    """최종 결과 조회 (종료 후에만)"""
    return service.results()

@router.post("/reset", response_model=ResetResponse, dependencies=[Depends(require_admin)])
async def reset_game(
    service: GameService = Depends(get_game_service),
    gateway: BroadcastGateway = Depends(get_gateway)
):
    """게임 초기화 (모든 투표 삭제)"""
    await run_in_threadpool(service.reset)
    await gateway.broadcast_reset()

    return ResetResponse()
