# PATH: apps/domains/assessments/migrations/0001_initial.py

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("students", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Assessment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "assessment_type",
                    models.CharField(
                        choices=[
                            ("quiz", "Quiz"),
                            ("unit_test", "Unit Test"),
                            ("assignment", "Assignment"),
                            ("exam", "Exam"),
                            ("practice", "Practice"),
                        ],
                        default="quiz",
                        max_length=20,
                    ),
                ),
                ("school_code", models.CharField(db_index=True, max_length=50)),
                ("class_instance_id", models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                ("time_limit_seconds", models.PositiveIntegerField(blank=True, null=True)),
                ("allow_reattempts", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "assessments_assessment",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="AssessmentQuestion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("order", models.PositiveIntegerField(default=0)),
                ("question_text", models.TextField()),
                (
                    "question_type",
                    models.CharField(
                        choices=[
                            ("choice", "Choice"),
                            ("short_text", "Short Text"),
                            ("long_text", "Long Text"),
                        ],
                        default="choice",
                        max_length=20,
                    ),
                ),
                ("options", models.JSONField(blank=True, default=list)),
                ("correct_index", models.PositiveIntegerField(blank=True, null=True)),
                ("correct_text", models.TextField(blank=True, null=True)),
                (
                    "assessment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="questions",
                        to="assessments.assessment",
                    ),
                ),
            ],
            options={
                "db_table": "assessments_question",
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="AssessmentAttempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("in_progress", "In Progress"),
                            ("completed", "Completed"),
                            ("abandoned", "Abandoned"),
                        ],
                        default="in_progress",
                        max_length=20,
                    ),
                ),
                ("answers", models.JSONField(blank=True, default=dict)),
                ("started_at", models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("score", models.PositiveIntegerField(blank=True, null=True)),
                ("earned_points", models.PositiveIntegerField(blank=True, null=True)),
                ("total_points", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "assessment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attempts",
                        to="assessments.assessment",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assessment_attempts",
                        to="students.student",
                    ),
                ),
            ],
            options={
                "db_table": "assessments_attempt",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["assessment", "student", "created_at"], name="assess_attempt_latest_idx"),
                    models.Index(fields=["student", "status"], name="assess_attempt_status_idx"),
                ],
            },
        ),
        migrations.AddConstraint(
            model_name="assessmentattempt",
            constraint=models.UniqueConstraint(
                condition=models.Q(("status", "in_progress")),
                fields=("assessment", "student"),
                name="uniq_in_progress_attempt",
            ),
        ),
    ]
