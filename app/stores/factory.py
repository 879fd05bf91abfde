# app/stores/factory.py
from app.core.logger import logger
from app.stores.base import GameStore, StoreUnavailable
from app.stores.fallback import FallbackGameStore
from app.stores.memory import MemoryGameStore
from app.stores.sql import SqlGameStore


def build_store(database_url: str, echo: bool = False) -> GameStore:
    """시작 시 저장소 선택 (DB 설정이 없거나 연결 실패 시 메모리)"""
    if not database_url:
        logger.info("DATABASE_URL 미설정 - 메모리 저장소 사용")
        return MemoryGameStore()

    try:
        primary = SqlGameStore(database_url, echo=echo)
    except StoreUnavailable as e:
        logger.error(f"DB 연결 실패 - 메모리 저장소로 시작: {e}")
        return MemoryGameStore()

    logger.info("DB 저장소 사용")
    return FallbackGameStore(primary, MemoryGameStore())
