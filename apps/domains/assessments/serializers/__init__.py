from .assessment import (
    AssessmentDetailSerializer,
    AssessmentSerializer,
    AvailableAssessmentSerializer,
    QuestionForTakingSerializer,
)
from .attempt import (
    AdminAttemptSerializer,
    AnswerInputSerializer,
    AttemptSerializer,
    ReattemptGrantInputSerializer,
    SubmitInputSerializer,
)

__all__ = [
    "AssessmentDetailSerializer",
    "AssessmentSerializer",
    "AvailableAssessmentSerializer",
    "QuestionForTakingSerializer",
    "AdminAttemptSerializer",
    "AnswerInputSerializer",
    "AttemptSerializer",
    "ReattemptGrantInputSerializer",
    "SubmitInputSerializer",
]
