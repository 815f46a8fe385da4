from django.db import models
from apps.api.common.models import BaseModel
from .assessment import Assessment


class AssessmentQuestion(BaseModel):
    """
    평가 문항 정의 (출제 화면 소유, 응시 코어에서는 읽기 전용)

    - choice: options + correct_index
    - short_text / long_text: correct_text (없으면 자동채점 불가)
    """

    class QuestionType(models.TextChoices):
        CHOICE = "choice", "Choice"
        SHORT_TEXT = "short_text", "Short Text"
        LONG_TEXT = "long_text", "Long Text"

    assessment = models.ForeignKey(
        Assessment,
        on_delete=models.CASCADE,
        related_name="questions",
    )

    order = models.PositiveIntegerField(default=0)

    question_text = models.TextField()

    question_type = models.CharField(
        max_length=20,
        choices=QuestionType.choices,
        default=QuestionType.CHOICE,
    )

    options = models.JSONField(default=list, blank=True)
    correct_index = models.PositiveIntegerField(null=True, blank=True)
    correct_text = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "assessments_question"
        ordering = ["order", "id"]

    def __str__(self):
        return f"{self.assessment} Q{self.order}"
