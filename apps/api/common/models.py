# PATH: apps/api/common/models.py
from django.db import models


class TimestampModel(models.Model):
    """
    생성 / 수정 시간 자동 기록 추상 모델
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class BaseModel(TimestampModel):
    """
    평가 도메인 모델 공통 베이스.

    - 공통 타임스탬프 포함
    - updated_at 은 auto_now 라 QuerySet.update() 경로에서는 직접 채워야 한다
    """
    class Meta:
        abstract = True
