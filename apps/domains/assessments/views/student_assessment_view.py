# PATH: apps/domains/assessments/views/student_assessment_view.py
"""
Student Assessment Views

GET /assessments/available/        응시 가능 목록 (완료 + 재응시 불가 평가는 숨김)
GET /assessments/history/          채점 완료 이력 (최근 완료순)
GET /assessments/{assessment_id}/  응시 화면 (문항 + 기존 attempt, 정답 제외)

- 학생을 못 찾으면 목록/이력은 빈 배열, 상세는 404
"""

from drf_yasg.utils import swagger_auto_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.domains.assessments.permissions import IsStudent
from apps.domains.assessments.serializers import (
    AssessmentDetailSerializer,
    AttemptSerializer,
    AvailableAssessmentSerializer,
)
from apps.domains.assessments.services.attempt_service import AssessmentAttemptService
from apps.domains.assessments.views.base import AssessmentAPIView


class MyAvailableAssessmentsView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, IsStudent]

    @swagger_auto_schema(responses={200: AvailableAssessmentSerializer(many=True)})
    def get(self, request):
        items = AssessmentAttemptService.available(self.learner_query(request))
        return Response(AvailableAssessmentSerializer(items, many=True).data)


class MyAssessmentHistoryView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, IsStudent]

    @swagger_auto_schema(responses={200: AttemptSerializer(many=True)})
    def get(self, request):
        attempts = AssessmentAttemptService.history(self.learner_query(request))
        return Response(AttemptSerializer(attempts, many=True).data)


class AssessmentForTakingView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, IsStudent]

    def get(self, request, assessment_id: int):
        learner = self.learner(request)
        found = AssessmentAttemptService.for_taking(
            assessment_id=int(assessment_id),
            learner_id=learner.id,
        )
        existing = found.existing_attempt
        return Response({
            "assessment": AssessmentDetailSerializer(found.assessment).data,
            "existing_attempt": AttemptSerializer(existing).data if existing else None,
        })
