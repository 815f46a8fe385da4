# apps/domains/assessments/models/__init__.py
from .assessment import Assessment
from .question import AssessmentQuestion
from .attempt import AssessmentAttempt

__all__ = [
    "Assessment",
    "AssessmentQuestion",
    "AssessmentAttempt",
]
