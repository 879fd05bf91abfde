# app/core/errors.py
from fastapi import status


class GameError(Exception):
    """투표 진행 중 발생하는 도메인 오류 (요청자에게만 전달)"""
    code = "GameError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "요청을 처리할 수 없습니다"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.message}


class InvalidTransition(GameError):
    """IDLE 상태가 아닌데 시작 요청"""
    code = "InvalidTransition"
    status_code = status.HTTP_409_CONFLICT
    default_message = "이미 시작되었거나 종료된 투표입니다"


class NotVotingPhase(GameError):
    """투표 시간이 아님 (시작 전 / 종료 후 구분 없음)"""
    code = "NotVotingPhase"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "투표 진행 중이 아닙니다"


class DuplicateVoter(GameError):
    code = "DuplicateVoter"
    status_code = status.HTTP_409_CONFLICT
    default_message = "이미 투표했습니다"


class InvalidInput(GameError):
    code = "InvalidInput"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "필수 항목이 비어 있습니다"


class ResultsNotReady(GameError):
    code = "ResultsNotReady"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "아직 결과를 볼 수 없습니다"


class AdminRequired(GameError):
    code = "AdminRequired"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "관리자 권한이 필요합니다"
