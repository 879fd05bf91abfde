# app/stores/base.py
from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.game import Ballot
from app.services.game_record import GameRecord


class StoreUnavailable(Exception):
    """저장소 접근 실패 (DB 연결/쿼리 오류)"""


class GameStore(ABC):
    """
    게임 레코드 저장소 인터페이스
    - 항상 레코드 1개만 유지
    - replace()는 기존 레코드를 지우고 새로 만든다 (투표 장부 초기화 보장)
    """
    name = "base"

    @abstractmethod
    def load(self) -> Optional[GameRecord]:
        """저장된 레코드 조회 (없으면 None)"""

    @abstractmethod
    def save(self, record: GameRecord) -> None:
        """상태/시작 시각 저장"""

    @abstractmethod
    def append_ballot(self, record: GameRecord, ballot: Ballot) -> None:
        """투표 한 건 추가"""

    @abstractmethod
    def replace(self, record: GameRecord) -> None:
        """기존 레코드 삭제 후 새 레코드 생성"""

    @property
    def degraded(self) -> bool:
        return False
