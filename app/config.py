# app/config.py
from typing import List

from pydantic_settings import BaseSettings
from pydantic import field_validator

class Settings(BaseSettings):
    """환경변수 설정"""

    # API 기본 설정
    app_name: str = "Impressive Vote API"
    debug: bool = False

    # Database (비워두면 메모리 저장소 사용)
    database_url: str = ""

    # 투표 설정
    game_duration_ms: int = 300_000  # 5분
    tick_interval_seconds: float = 1.0

    # 관리자 토큰 (비워두면 관리자 기능 개방)
    admin_token: str = ""

    # CORS
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    @field_validator('game_duration_ms')
    def validate_game_duration(cls, v):
        if v <= 0:
            raise ValueError('GAME_DURATION_MS는 0보다 커야 합니다')
        return v

    @field_validator('tick_interval_seconds')
    def validate_tick_interval(cls, v):
        if v <= 0:
            raise ValueError('TICK_INTERVAL_SECONDS는 0보다 커야 합니다')
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False

# 싱글톤 인스턴스
settings = Settings()
