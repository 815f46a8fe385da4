from django.db import models
from django.utils import timezone

from apps.api.common.models import BaseModel
from .assessment import Assessment


class AssessmentAttempt(BaseModel):
    """
    학생의 '평가 1회 응시'

    🔥 핵심 불변식
    --------------------------------------------------
    (assessment, student) 쌍마다 IN_PROGRESS 행은 최대 1개.
    - DB partial unique 로 강제 (동시 start 중복 클릭 방지)
    - 상태 변경은 항상 status 조건부 update (수동/자동 제출 경합 방지)

    상태
    --------------------------------------------------
    in_progress → completed (종료)
    completed → abandoned (재응시 권한 부여, 새 행 허용)
    completed → in_progress (같은 행 초기화 방식의 재응시)
    """

    class Status(models.TextChoices):
        IN_PROGRESS = "in_progress", "In Progress"
        COMPLETED = "completed", "Completed"
        ABANDONED = "abandoned", "Abandoned"

    assessment = models.ForeignKey(
        Assessment,
        on_delete=models.CASCADE,
        related_name="attempts",
    )
    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="assessment_attempts",
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.IN_PROGRESS,
    )

    # question_id(str) → 제출 값
    answers = models.JSONField(default=dict, blank=True)

    started_at = models.DateTimeField(default=timezone.now, null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    # 채점 전에는 null
    score = models.PositiveIntegerField(null=True, blank=True)
    earned_points = models.PositiveIntegerField(null=True, blank=True)
    total_points = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        db_table = "assessments_attempt"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["assessment", "student"],
                name="uniq_in_progress_attempt",
                condition=models.Q(status="in_progress"),
            )
        ]
        indexes = [
            models.Index(fields=["assessment", "student", "created_at"], name="assess_attempt_latest_idx"),
            models.Index(fields=["student", "status"], name="assess_attempt_status_idx"),
        ]

    def __str__(self):
        return (
            f"AssessmentAttempt assessment={self.assessment_id} "
            f"student={self.student_id} "
            f"{self.status}"
        )
