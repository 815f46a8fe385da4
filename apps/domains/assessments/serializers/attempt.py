# apps/domains/assessments/serializers/attempt.py
from rest_framework import serializers

from apps.domains.assessments.models import AssessmentAttempt


class AttemptSerializer(serializers.Serializer):
    """Attempt 엔티티 출력."""

    id = serializers.IntegerField()
    assessment_id = serializers.IntegerField()
    learner_id = serializers.IntegerField()
    status = serializers.CharField(source="status.value")
    answers = serializers.JSONField()
    started_at = serializers.DateTimeField(allow_null=True)
    completed_at = serializers.DateTimeField(allow_null=True)
    score = serializers.IntegerField(allow_null=True)
    earned_points = serializers.IntegerField(allow_null=True)
    total_points = serializers.IntegerField(allow_null=True)


class AnswerInputSerializer(serializers.Serializer):
    question_id = serializers.CharField()
    # choice 는 선택지 문자열, text 계열은 자유 입력. null 은 답 지우기
    value = serializers.JSONField(allow_null=True)


class SubmitInputSerializer(serializers.Serializer):
    answers = serializers.DictField(required=False, default=dict)
    auto = serializers.BooleanField(required=False, default=False)


class ReattemptGrantInputSerializer(serializers.Serializer):
    learner_id = serializers.IntegerField(min_value=1)


class AdminAttemptSerializer(serializers.ModelSerializer):
    assessment_title = serializers.CharField(source="assessment.title", read_only=True)
    student_name = serializers.CharField(source="student.name", read_only=True)

    class Meta:
        model = AssessmentAttempt
        fields = [
            "id",
            "assessment",
            "assessment_title",
            "student",
            "student_name",
            "status",
            "answers",
            "started_at",
            "completed_at",
            "score",
            "earned_points",
            "total_points",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
