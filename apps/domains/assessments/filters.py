# apps/domains/assessments/filters.py

import django_filters

from .models import AssessmentAttempt


class AssessmentAttemptFilter(django_filters.FilterSet):
    """
    관리자 attempt 목록 필터.
    Front uses: /assessments/admin/attempts/?assessment={id}&student={id}&status=completed
    """

    school_code = django_filters.CharFilter(field_name="assessment__school_code")

    class Meta:
        model = AssessmentAttempt
        fields = {
            "assessment": ["exact"],
            "student": ["exact"],
            "status": ["exact"],
        }
