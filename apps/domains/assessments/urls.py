# PATH: apps/domains/assessments/urls.py

from django.urls import path

from apps.domains.assessments.views import (
    AdminAttemptListView,
    AssessmentForTakingView,
    GrantReattemptView,
    MyAssessmentHistoryView,
    MyAvailableAssessmentsView,
    SaveAnswerView,
    StartAttemptView,
    SubmitAttemptView,
)

urlpatterns = [
    # ======================================================
    # Student
    # ======================================================
    path("available/", MyAvailableAssessmentsView.as_view(), name="assessment-available"),
    path("history/", MyAssessmentHistoryView.as_view(), name="assessment-history"),
    path("<int:assessment_id>/", AssessmentForTakingView.as_view(), name="assessment-detail"),
    path(
        "<int:assessment_id>/attempts/start/",
        StartAttemptView.as_view(),
        name="assessment-attempt-start",
    ),
    path(
        "attempts/<int:attempt_id>/answers/",
        SaveAnswerView.as_view(),
        name="assessment-attempt-answers",
    ),
    path(
        "attempts/<int:attempt_id>/submit/",
        SubmitAttemptView.as_view(),
        name="assessment-attempt-submit",
    ),

    # ======================================================
    # Admin / Teacher
    # ======================================================
    path(
        "attempts/<int:attempt_id>/reattempt/",
        GrantReattemptView.as_view(),
        name="assessment-attempt-reattempt",
    ),
    path("admin/attempts/", AdminAttemptListView.as_view(), name="assessment-admin-attempts"),
]
