# PATH: apps/domains/assessments/views/attempt_view.py
"""
학생 응시 흐름

POST /assessments/{assessment_id}/attempts/start/   시작 또는 재개 (중복 클릭 안전)
PUT  /assessments/attempts/{attempt_id}/answers/    문항 1건 저장
POST /assessments/attempts/{attempt_id}/submit/     제출 (수동 / 타이머 자동)

✅ 제출 경합 계약
- 다른 경로가 먼저 제출을 끝냈으면 200 + already_submitted=true (저장된 결과)
- 이미 제출된 attempt 에 수동 제출 → 409 invalid_state
"""

from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.domains.assessments.permissions import IsStudent
from apps.domains.assessments.serializers import (
    AnswerInputSerializer,
    AttemptSerializer,
    SubmitInputSerializer,
)
from apps.domains.assessments.services.attempt_service import AssessmentAttemptService
from apps.domains.assessments.views.base import AssessmentAPIView


class StartAttemptView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, IsStudent]

    def post(self, request, assessment_id: int):
        learner = self.learner(request)
        started = AssessmentAttemptService.start(
            assessment_id=int(assessment_id),
            learner_id=learner.id,
        )
        return Response(
            {
                "attempt": AttemptSerializer(started.attempt).data,
                "remaining_seconds": started.remaining_seconds,
            },
            status=status.HTTP_200_OK,
        )


class SaveAnswerView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, IsStudent]

    @swagger_auto_schema(request_body=AnswerInputSerializer, responses={200: AttemptSerializer})
    def put(self, request, attempt_id: int):
        ser = AnswerInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        learner = self.learner(request)
        attempt = AssessmentAttemptService.save_answer(
            attempt_id=int(attempt_id),
            learner_id=learner.id,
            question_id=ser.validated_data["question_id"],
            value=ser.validated_data["value"],
        )
        return Response(AttemptSerializer(attempt).data)


class SubmitAttemptView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, IsStudent]

    @swagger_auto_schema(request_body=SubmitInputSerializer)
    def post(self, request, attempt_id: int):
        ser = SubmitInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        learner = self.learner(request)
        outcome = AssessmentAttemptService.submit(
            attempt_id=int(attempt_id),
            learner_id=learner.id,
            answers=ser.validated_data.get("answers") or {},
            auto=ser.validated_data.get("auto", False),
        )
        return Response({
            "attempt": AttemptSerializer(outcome.attempt).data,
            "already_submitted": outcome.already_submitted,
        })
