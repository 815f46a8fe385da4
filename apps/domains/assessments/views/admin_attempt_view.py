# PATH: apps/domains/assessments/views/admin_attempt_view.py
"""
Admin / Teacher 전용

GET  /assessments/admin/attempts/?assessment=&student=&status=&school_code=
POST /assessments/attempts/{attempt_id}/reattempt/   재응시 권한 부여 (body: learner_id)

- 재응시 방식은 settings.ASSESSMENT_REATTEMPT_STRATEGY (start 경로와 동일)
- 진행 중(in_progress) attempt 에는 적용 불가 → 409
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg.utils import swagger_auto_schema
from rest_framework.filters import OrderingFilter
from rest_framework.generics import ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.domains.assessments.filters import AssessmentAttemptFilter
from apps.domains.assessments.models import AssessmentAttempt
from apps.domains.assessments.permissions import IsTeacherOrAdmin
from apps.domains.assessments.serializers import (
    AdminAttemptSerializer,
    AttemptSerializer,
    ReattemptGrantInputSerializer,
)
from apps.domains.assessments.services.attempt_service import AssessmentAttemptService
from apps.domains.assessments.views.base import AssessmentAPIView


class AdminAttemptListView(ListAPIView):
    queryset = (
        AssessmentAttempt.objects.all()
        .select_related("assessment", "student")
        .order_by("-created_at", "-id")
    )
    serializer_class = AdminAttemptSerializer
    permission_classes = [IsAuthenticated, IsTeacherOrAdmin]

    filter_backends = (DjangoFilterBackend, OrderingFilter)
    filterset_class = AssessmentAttemptFilter
    ordering_fields = ["created_at", "completed_at", "score"]


class GrantReattemptView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, IsTeacherOrAdmin]

    @swagger_auto_schema(request_body=ReattemptGrantInputSerializer, responses={200: AttemptSerializer})
    def post(self, request, attempt_id: int):
        ser = ReattemptGrantInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        attempt = AssessmentAttemptService.grant(
            attempt_id=int(attempt_id),
            learner_id=ser.validated_data["learner_id"],
        )
        return Response(AttemptSerializer(attempt).data)
