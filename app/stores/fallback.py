# app/stores/fallback.py
from typing import Optional

from app.core.logger import logger
from app.schemas.game import Ballot
from app.services.game_record import GameRecord
from app.stores.base import GameStore, StoreUnavailable
from app.stores.memory import MemoryGameStore


class FallbackGameStore(GameStore):
    """
    주 저장소(DB) + 메모리 예비 저장소
    - DB 오류가 나면 로그를 남기고 메모리 저장소로 전환
    - 전환 후에는 계속 메모리 저장소 사용 (단일 프로세스 전제)
    """

    def __init__(self, primary: GameStore, fallback: Optional[GameStore] = None):
        self._primary = primary
        self._fallback = fallback or MemoryGameStore()
        self._degraded = False

    @property
    def name(self) -> str:
        if self._degraded:
            return self._fallback.name
        return self._primary.name

    @property
    def degraded(self) -> bool:
        return self._degraded

    def _degrade(self, error: StoreUnavailable, record: Optional[GameRecord]) -> None:
        logger.error(f"저장소 오류 - 메모리 저장소로 전환: {error}")
        self._degraded = True
        if record is not None:
            self._fallback.replace(record)

    def load(self) -> Optional[GameRecord]:
        if not self._degraded:
            try:
                return self._primary.load()
            except StoreUnavailable as e:
                self._degrade(e, None)
        return self._fallback.load()

    def save(self, record: GameRecord) -> None:
        if not self._degraded:
            try:
                self._primary.save(record)
                return
            except StoreUnavailable as e:
                self._degrade(e, record)
                return
        self._fallback.save(record)

    def append_ballot(self, record: GameRecord, ballot: Ballot) -> None:
        if not self._degraded:
            try:
                self._primary.append_ballot(record, ballot)
                return
            except StoreUnavailable as e:
                # record에는 이미 ballot이 들어 있음
                self._degrade(e, record)
                return
        self._fallback.append_ballot(record, ballot)

    def replace(self, record: GameRecord) -> None:
        if not self._degraded:
            try:
                self._primary.replace(record)
                return
            except StoreUnavailable as e:
                self._degrade(e, record)
                return
        self._fallback.replace(record)
