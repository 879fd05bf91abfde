# app/services/game_service.py
import threading
from typing import Any, Callable, Optional

from app.core.errors import (
    DuplicateVoter,
    InvalidInput,
    InvalidTransition,
    NotVotingPhase,
    ResultsNotReady,
)
from app.core.logger import logger
from app.models.game import GameStatus, DEFAULT_DURATION_MS
from app.schemas.game import AdminGameState, Ballot, GameResults, GameState
from app.services import results_service
from app.services.game_record import GameRecord, now_ms
from app.stores.base import GameStore

def _clean(value: Any, field: str) -> str:
    """앞뒤 공백 제거 후 빈 값이면 InvalidInput"""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{field} 값이 비어 있습니다")
    return value.strip()

def _voter_key(voter_id: Any) -> Optional[str]:
    """조회용 투표자 ID (문자열이 아니면 None)"""
    if isinstance(voter_id, str) and voter_id.strip():
        return voter_id.strip()
    return None

class GameService:
    """
    게임 상태 머신
    - IDLE -> VOTING (start), VOTING -> FINISHED (시간 만료), 아무 상태 -> IDLE (reset)
    - 모든 조회/변경은 하나의 락 안에서 시간 만료 체크(_refresh) 후 수행
    - 틱 루프도 refresh()로 같은 락을 사용
    """

    def __init__(
        self,
        store: GameStore,
        duration_ms: int = DEFAULT_DURATION_MS,
        clock: Callable[[], int] = now_ms
    ):
        self._lock = threading.RLock()
        self._store = store
        self._duration_ms = duration_ms
        self._clock = clock

        record = store.load()
        if record is None:
            record = GameRecord(duration_ms=duration_ms)
            store.replace(record)
            logger.info(f"새 게임 생성: {record}")
        else:
            logger.info(f"저장된 게임 불러옴: {record}")
        self._record = record

    @property
    def store(self) -> GameStore:
        return self._store

    # ===== 시간 만료 체크 =====

    def _refresh(self, now: int) -> GameStatus:
        if self._record.promote(now):
            logger.info(f"투표 시간 종료 - {len(self._record.ledger)}표로 마감")
            self._store.save(self._record)
        return self._record.status

    def refresh(self) -> GameStatus:
        """현재 상태 확인 (틱 루프에서 호출)"""
        with self._lock:
            return self._refresh(self._clock())

    # ===== 조회 =====

    def _public_state(self, now: int, voter_id: Optional[str] = None) -> GameState:
        record = self._record
        return GameState(
            status=self._refresh(now),
            start_time=record.start_time,
            duration_ms=record.duration_ms,
            server_time=now,
            total_votes=len(record.ledger),
            has_voted=record.ledger.has_voted(_voter_key(voter_id))
        )

    def public_state(self, voter_id: Optional[str] = None) -> GameState:
        """공개 상태 (voter_id가 있으면 투표 여부 포함)"""
        with self._lock:
            return self._public_state(self._clock(), voter_id)

    def admin_state(self) -> AdminGameState:
        """관리자용 상태 (전체 투표 목록 포함)"""
        with self._lock:
            state = self._public_state(self._clock())
            return AdminGameState(
                **state.model_dump(),
                votes=self._record.ledger.ballots()
            )

    def has_voted(self, voter_id: Any) -> bool:
        with self._lock:
            return self._record.ledger.has_voted(_voter_key(voter_id))

    def results(self) -> GameResults:
        """최종 결과 (FINISHED일 때만)"""
        with self._lock:
            if self._refresh(self._clock()) != GameStatus.FINISHED:
                raise ResultsNotReady()
            ballots = self._record.ledger.ballots()

        return results_service.aggregate(ballots)

    # ===== 변경 =====

    def start(self) -> int:
        """투표 시작, 시작 시각 반환"""
        with self._lock:
            now = self._clock()
            if self._refresh(now) != GameStatus.IDLE:
                raise InvalidTransition()

            self._record.status = GameStatus.VOTING
            self._record.start_time = now
            self._store.save(self._record)

            logger.info(f"투표 시작 - {self._record.duration_ms}ms 동안 진행")
            return now

    def cast_vote(self, voter_id: Any, mr_name: Any, mrs_name: Any) -> Ballot:
        """투표 (상태 -> 입력값 -> 중복 순서로 검증)"""
        with self._lock:
            now = self._clock()
            if self._refresh(now) != GameStatus.VOTING:
                raise NotVotingPhase()

            ballot = Ballot(
                voter_id=_clean(voter_id, "voter_id"),
                mr_name=_clean(mr_name, "mr_name"),
                mrs_name=_clean(mrs_name, "mrs_name"),
                timestamp=now
            )

            if self._record.ledger.has_voted(ballot.voter_id):
                logger.warning(f"중복 투표 거절: {ballot.voter_id}")
                raise DuplicateVoter()

            self._record.ledger.append(ballot)
            self._store.append_ballot(self._record, ballot)

            logger.info(f"투표 완료: {ballot.voter_id} (총 {len(self._record.ledger)}표)")
            return ballot

    def reset(self) -> None:
        """게임 초기화 (모든 투표 삭제, 되돌릴 수 없음)"""
        with self._lock:
            discarded = len(self._record.ledger)
            self._record = GameRecord(duration_ms=self._duration_ms)
            self._store.replace(self._record)

            logger.warning(f"게임 초기화 - 투표 {discarded}건 삭제")
