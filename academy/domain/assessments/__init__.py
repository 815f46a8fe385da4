from academy.domain.assessments.entities import (
    AnswerMap,
    Assessment,
    Attempt,
    AttemptStatus,
    Learner,
    Question,
    QuestionType,
)
from academy.domain.assessments.errors import (
    AssessmentDomainError,
    ConditionFailed,
    InvalidState,
    NotFound,
    TransientStoreError,
    Unauthorized,
)

__all__ = [
    "AnswerMap",
    "Assessment",
    "Attempt",
    "AttemptStatus",
    "Learner",
    "Question",
    "QuestionType",
    "AssessmentDomainError",
    "ConditionFailed",
    "InvalidState",
    "NotFound",
    "TransientStoreError",
    "Unauthorized",
]
