from django.contrib import admin
from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "school_code",
        "student_code",
        "email",
        "class_instance_id",
        "created_at",
    )
    list_filter = (
        "school_code",
        "class_instance_id",
    )
    search_fields = ("name", "student_code", "email")
