# app/stores/sql.py
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import Base, create_session_factory
from app.models.game import Game
from app.models.vote import Vote
from app.schemas.game import Ballot
from app.services.game_record import GameRecord
from app.stores.base import GameStore, StoreUnavailable


def _to_record(game: Game) -> GameRecord:
    """DB 행 -> 도메인 레코드"""
    return GameRecord(
        id=game.id,
        status=game.status,
        start_time=game.start_time,
        duration_ms=game.duration_ms,
        ballots=[Ballot.model_validate(vote) for vote in game.votes]
    )


def _to_vote(game_id: str, ballot: Ballot) -> Vote:
    return Vote(
        game_id=game_id,
        voter_id=ballot.voter_id,
        mr_name=ballot.mr_name,
        mrs_name=ballot.mrs_name,
        timestamp=ballot.timestamp
    )


class SqlGameStore(GameStore):
    """SQLAlchemy 저장소 (games 1행 + votes)"""
    name = "sql"

    def __init__(self, database_url: str, echo: bool = False):
        try:
            self._session_factory = create_session_factory(database_url, echo=echo)
            Base.metadata.create_all(bind=self._session_factory.kw["bind"])
        except (SQLAlchemyError, ImportError) as e:
            # ImportError: DB 드라이버 미설치
            raise StoreUnavailable(f"DB 초기화 실패: {e}") from e

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """세션 생성 -> 커밋 -> 종료 (오류 시 롤백)"""
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreUnavailable(str(e)) from e
        finally:
            db.close()

    def load(self) -> Optional[GameRecord]:
        with self._session() as db:
            game = db.query(Game).order_by(Game.created_at.desc()).first()
            if not game:
                return None
            return _to_record(game)

    def save(self, record: GameRecord) -> None:
        with self._session() as db:
            game = db.get(Game, record.id)
            if game is None:
                # 다른 레코드가 남아 있으면 통째로 교체
                self._replace(db, record)
                return

            game.status = record.status
            game.start_time = record.start_time
            game.duration_ms = record.duration_ms

    def append_ballot(self, record: GameRecord, ballot: Ballot) -> None:
        with self._session() as db:
            if db.get(Game, record.id) is None:
                self._replace(db, record)
                return
            db.add(_to_vote(record.id, ballot))

    def replace(self, record: GameRecord) -> None:
        with self._session() as db:
            self._replace(db, record)

    def _replace(self, db: Session, record: GameRecord) -> None:
        # 삭제 후 재생성 (투표 먼저 삭제)
        db.query(Vote).delete(synchronize_session=False)
        db.query(Game).delete(synchronize_session=False)

        game = Game(
            id=record.id,
            status=record.status,
            start_time=record.start_time,
            duration_ms=record.duration_ms
        )
        game.votes = [_to_vote(record.id, ballot) for ballot in record.ledger]
        db.add(game)
