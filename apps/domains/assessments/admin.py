from django.contrib import admin

from .models import Assessment, AssessmentAttempt, AssessmentQuestion


class AssessmentQuestionInline(admin.TabularInline):
    model = AssessmentQuestion
    extra = 0
    fields = ("order", "question_text", "question_type", "options", "correct_index", "correct_text")


@admin.register(Assessment)
class AssessmentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "title",
        "assessment_type",
        "school_code",
        "class_instance_id",
        "time_limit_seconds",
        "allow_reattempts",
        "is_active",
    )
    list_filter = ("assessment_type", "school_code", "allow_reattempts", "is_active")
    search_fields = ("title",)
    inlines = [AssessmentQuestionInline]


@admin.register(AssessmentAttempt)
class AssessmentAttemptAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "assessment",
        "student",
        "status",
        "score",
        "total_points",
        "started_at",
        "completed_at",
    )
    list_filter = ("status",)
    raw_id_fields = ("assessment", "student")
