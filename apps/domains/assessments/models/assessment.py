from django.db import models
from apps.api.common.models import BaseModel


class Assessment(BaseModel):
    """
    평가 정의 (응시 중에는 불변)

    - 반(class_instance_id) 단위 배정
    - time_limit_seconds 없으면 시간 제한 없음
    """

    class AssessmentType(models.TextChoices):
        QUIZ = "quiz", "Quiz"
        UNIT_TEST = "unit_test", "Unit Test"
        ASSIGNMENT = "assignment", "Assignment"
        EXAM = "exam", "Exam"
        PRACTICE = "practice", "Practice"

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    assessment_type = models.CharField(
        max_length=20,
        choices=AssessmentType.choices,
        default=AssessmentType.QUIZ,
    )

    school_code = models.CharField(max_length=50, db_index=True)

    # 반 배정 (FK 강제 X)
    class_instance_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)

    time_limit_seconds = models.PositiveIntegerField(null=True, blank=True)

    # 완료 후 학생 스스로 재응시 가능 여부
    allow_reattempts = models.BooleanField(default=False)

    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "assessments_assessment"
        ordering = ["-created_at"]

    def __str__(self):
        return self.title
