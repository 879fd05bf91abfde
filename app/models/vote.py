# app/models/vote.py
from sqlalchemy import Column, String, Integer, BigInteger, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base

class Vote(Base):
    """투표 모델"""
    __tablename__ = "votes"
    __table_args__ = (
        # 게임당 한 사람 한 표
        UniqueConstraint("game_id", "voter_id", name="uq_votes_game_voter"),
    )

    # 입력 순서 = 투표 순서
    seq = Column(Integer, primary_key=True, autoincrement=True)
    game_id = Column(String, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True)

    # 투표자 정보 (자기 신고 식별자, 인증 없음)
    voter_id = Column(String, nullable=False)

    # 투표 내용
    mr_name = Column(String, nullable=False)
    mrs_name = Column(String, nullable=False)

    # 서버 기준 투표 시각 (epoch ms)
    timestamp = Column(BigInteger, nullable=False)

    # 관계
    game = relationship("Game", back_populates="votes")

    def __repr__(self):
        return f"<Vote {self.voter_id} for Game {self.game_id}>"
