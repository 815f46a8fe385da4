from .admin_attempt_view import AdminAttemptListView, GrantReattemptView
from .attempt_view import SaveAnswerView, StartAttemptView, SubmitAttemptView
from .student_assessment_view import (
    AssessmentForTakingView,
    MyAssessmentHistoryView,
    MyAvailableAssessmentsView,
)

__all__ = [
    "AdminAttemptListView",
    "GrantReattemptView",
    "SaveAnswerView",
    "StartAttemptView",
    "SubmitAttemptView",
    "AssessmentForTakingView",
    "MyAssessmentHistoryView",
    "MyAvailableAssessmentsView",
]
