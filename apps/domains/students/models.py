from django.db import models
from django.conf import settings

from apps.api.common.models import TimestampModel


class Student(TimestampModel):
    """
    학생 명단(roster) 레코드.

    - 평가 응시 주체(learner)
    - school_code 범위 안에서만 조회한다 (멀티 스쿨 격리)
    - class_instance_id = 반 배정. 평가는 반 단위로 배정된다.
    """

    # =========================
    # 🔐 로그인 사용자 연결
    # =========================
    # - 기존 데이터/운영 고려: null 허용
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="student_profile",
        help_text="학생이 로그인 계정을 가지는 경우 연결",
    )

    # =========================
    # 기본 정보
    # =========================
    name = models.CharField(max_length=50)

    school_code = models.CharField(max_length=50, db_index=True)

    # 학번 (hint code). 학교 안에서만 유일
    student_code = models.CharField(max_length=50, null=True, blank=True)

    # 연락 이메일 (학번이 없을 때 보조 식별)
    email = models.EmailField(null=True, blank=True)

    # 반 배정 (FK 강제 X)
    class_instance_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)

    class Meta:
        ordering = ["-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                name="uniq_student_user",
                condition=models.Q(user__isnull=False),
            ),
            models.UniqueConstraint(
                fields=["school_code", "student_code"],
                name="uniq_student_code_per_school",
                condition=models.Q(student_code__isnull=False),
            ),
        ]
        indexes = [
            models.Index(fields=["school_code", "email"], name="students_school_email_idx"),
        ]

    def __str__(self):
        return self.name
