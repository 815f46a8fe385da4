from academy.application.use_cases.assessments.attempt_session import AttemptSession, format_remaining
from academy.application.use_cases.assessments.grant_reattempt import grant_reattempt
from academy.application.use_cases.assessments.list_assessments import (
    get_assessment_for_taking,
    get_attempt_history,
    list_available_assessments,
)
from academy.application.use_cases.assessments.record_answer import record_answer
from academy.application.use_cases.assessments.resolve_learner import (
    LearnerQuery,
    resolve_learner,
    try_resolve_learner,
)
from academy.application.use_cases.assessments.start_attempt import start_attempt
from academy.application.use_cases.assessments.submit_attempt import submit_attempt

__all__ = [
    "AttemptSession",
    "format_remaining",
    "grant_reattempt",
    "get_assessment_for_taking",
    "get_attempt_history",
    "list_available_assessments",
    "record_answer",
    "LearnerQuery",
    "resolve_learner",
    "try_resolve_learner",
    "start_attempt",
    "submit_attempt",
]
