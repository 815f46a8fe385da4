# PATH: apps/domains/assessments/views/base.py
"""
평가 view 공통

- 도메인 오류 → {"detail", "code"} + 오류별 HTTP status
- 요청 사용자 → Learner 해석
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.domain.assessments.entities import Learner
from academy.domain.assessments.errors import AssessmentDomainError, TransientStoreError
from apps.domains.assessments.services.attempt_service import (
    AssessmentAttemptService,
    learner_query_for_user,
)

logger = logging.getLogger(__name__)


def domain_error_response(exc: AssessmentDomainError) -> Response:
    return Response(
        {"detail": exc.message or str(exc), "code": exc.code},
        status=exc.http_status,
    )


class AssessmentAPIView(APIView):
    def handle_exception(self, exc):
        if isinstance(exc, AssessmentDomainError):
            if isinstance(exc, TransientStoreError):
                logger.error("assessment store failure view=%s err=%s", type(self).__name__, exc)
            return domain_error_response(exc)
        if isinstance(exc, ValueError):
            # school_code 누락 등 입력 범위 오류
            return Response(
                {"detail": str(exc), "code": "invalid_request"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return super().handle_exception(exc)

    def learner_query(self, request):
        return learner_query_for_user(request.user, request.query_params)

    def learner(self, request) -> Learner:
        return AssessmentAttemptService.resolve(self.learner_query(request))
