# apps/domains/assessments/serializers/assessment.py
"""
학생 응시 화면용 (도메인 엔티티 → JSON)

❗ 정답(correct_index / correct_text)은 절대 내보내지 않는다.
"""
from rest_framework import serializers


class QuestionForTakingSerializer(serializers.Serializer):
    id = serializers.CharField()
    text = serializers.CharField()
    question_type = serializers.CharField(source="question_type.value")
    options = serializers.ListField(child=serializers.CharField())


class AssessmentSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    assessment_type = serializers.CharField()
    group_id = serializers.IntegerField(allow_null=True)
    time_limit_seconds = serializers.IntegerField(allow_null=True)
    allow_reattempts = serializers.BooleanField()
    question_count = serializers.IntegerField()
    created_at = serializers.DateTimeField(allow_null=True)


class AssessmentDetailSerializer(AssessmentSerializer):
    questions = QuestionForTakingSerializer(many=True)


class AvailableAssessmentSerializer(serializers.Serializer):
    """AvailableAssessment → 목록 행 (Start / Resume 버튼 결정용 latest_status 포함)."""

    assessment = AssessmentSerializer()
    latest_status = serializers.SerializerMethodField()
    can_resume = serializers.BooleanField()

    def get_latest_status(self, obj):
        return obj.latest_status.value if obj.latest_status else None
