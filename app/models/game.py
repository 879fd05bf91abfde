# app/models/game.py
from sqlalchemy import Column, String, Integer, BigInteger, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
import uuid
import enum

DEFAULT_DURATION_MS = 300_000  # 5분

class GameStatus(str, enum.Enum):
    """게임 상태 (IDLE -> VOTING -> FINISHED, 리셋 시에만 IDLE로)"""
    IDLE = "IDLE"          # 시작 전
    VOTING = "VOTING"      # 투표 중
    FINISHED = "FINISHED"  # 종료

class Game(Base):
    """게임 모델 (항상 한 행만 존재)"""
    __tablename__ = "games"

    # 기본 필드
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # 진행 상태
    status = Column(SQLEnum(GameStatus), nullable=False, default=GameStatus.IDLE)
    start_time = Column(BigInteger, nullable=True)  # epoch ms, IDLE이면 NULL
    duration_ms = Column(Integer, nullable=False, default=DEFAULT_DURATION_MS)

    # 타임스탬프
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # 관계 (투표 순서 유지)
    votes = relationship(
        "Vote",
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="Vote.seq"
    )

    def __repr__(self):
        return f"<Game {self.id} - {self.status}>"
