"""
공용 fixture

- 시간 관련 테스트는 FakeClock으로 서버 시각을 직접 조정
- 각 테스트가 자기 GameService / 앱을 새로 만든다 (전역 상태 없음)
"""
import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.services.game_service import GameService
from app.stores.memory import MemoryGameStore
from helpers.fake_clock import DURATION_MS, FakeClock
from main import create_app


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(0)


@pytest.fixture
def store() -> MemoryGameStore:
    return MemoryGameStore()


@pytest.fixture
def service(store: MemoryGameStore, clock: FakeClock) -> GameService:
    return GameService(store, duration_ms=DURATION_MS, clock=clock)


@pytest.fixture
def test_settings() -> Settings:
    # 틱 루프는 테스트 중 돌지 않도록 간격을 길게
    return Settings(
        database_url="",
        game_duration_ms=DURATION_MS,
        tick_interval_seconds=3600,
        admin_token=""
    )


@pytest.fixture
def app(test_settings: Settings, service: GameService):
    return create_app(test_settings, service=service)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
