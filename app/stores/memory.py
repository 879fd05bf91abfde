# app/stores/memory.py
from typing import Optional

from app.schemas.game import Ballot
from app.services.game_record import GameRecord
from app.stores.base import GameStore


class MemoryGameStore(GameStore):
    """프로세스 메모리 저장소 (재시작 시 초기화)"""
    name = "memory"

    def __init__(self):
        self._record: Optional[GameRecord] = None

    def load(self) -> Optional[GameRecord]:
        return self._record

    def save(self, record: GameRecord) -> None:
        self._record = record

    def append_ballot(self, record: GameRecord, ballot: Ballot) -> None:
        # 레코드 장부에 이미 반영된 상태로 전달됨
        self._record = record

    def replace(self, record: GameRecord) -> None:
        self._record = record
