# app/core/security.py
import secrets

def verify_admin_token(expected: str, supplied: str | None) -> bool:
    """관리자 토큰 검증 (설정된 토큰이 없으면 항상 허용)"""
    if not expected:
        return True
    if not supplied:
        return False
    return secrets.compare_digest(expected.encode(), supplied.encode())
