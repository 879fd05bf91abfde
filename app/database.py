# app/database.py
from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

# Base 클래스 (모든 모델의 부모)
Base = declarative_base()

def create_session_factory(database_url: str, echo: bool = False) -> sessionmaker:
    """엔진 생성 후 세션 팩토리 반환"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # 요청 처리 스레드가 달라도 같은 연결 사용 가능하도록
        connect_args["check_same_thread"] = False

    engine = create_engine(
        database_url,
        echo=echo,  # SQL 쿼리 로그 출력
        connect_args=connect_args
    )

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
