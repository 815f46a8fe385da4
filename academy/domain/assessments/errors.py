"""
평가 도메인 오류 — 순수 파이썬

code / http_status 는 view 계층에서 그대로 응답으로 매핑한다.
"""
from __future__ import annotations

from typing import Optional


class AssessmentDomainError(Exception):
    """평가 도메인 규칙 위반 등."""

    code = "error"
    http_status = 400

    def __init__(self, message: str = "", *, code: Optional[str] = None):
        super().__init__(message)
        self.message = str(message)
        if code:
            self.code = str(code)


class NotFound(AssessmentDomainError):
    """평가 / attempt / 학생 레코드 없음. 목록 경로에서는 '보여줄 것 없음'."""

    code = "not_found"
    http_status = 404


class Unauthorized(AssessmentDomainError):
    """attempt 소유 학생 ≠ 호출자. 재시도 금지."""

    code = "unauthorized"
    http_status = 403


class InvalidState(AssessmentDomainError):
    """IN_PROGRESS가 아닌 attempt에 대한 제출/저장, 재응시 불가 평가의 start 등."""

    code = "invalid_state"
    http_status = 409


class ConditionFailed(AssessmentDomainError):
    """조건부 update(expected_status)가 경합에서 짐. 호출자가 재조회 후 판단."""

    code = "condition_failed"
    http_status = 409


class TransientStoreError(AssessmentDomainError):
    """저장소 네트워크/스키마 거부 등 insert/update 실패."""

    code = "transient_store_error"
    http_status = 503
