# PATH: apps/domains/assessments/services/policy_loader.py
"""
settings.ASSESSMENT_* → AttemptPolicy

잘못된 값은 조용히 기본값으로 떨어뜨리지 않고 ImproperlyConfigured 로 막는다
(재응시 방식이 배포마다 섞이면 start / grant 경로가 서로 다른 규칙을 따르게 됨).
"""
from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from academy.domain.assessments.policy import (
    DEFAULT_WARNING_THRESHOLDS,
    AttemptPolicy,
    ReattemptStrategy,
    ResumeTimerMode,
)

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


def _as_bool(name: str, raw) -> bool:
    if isinstance(raw, bool):
        return raw
    v = str(raw).strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ImproperlyConfigured(f"{name} must be a boolean (got {raw!r})")


def _as_thresholds(raw) -> tuple[int, ...]:
    if raw is None or raw == "":
        return DEFAULT_WARNING_THRESHOLDS
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    try:
        values = sorted({int(str(x).strip()) for x in items if str(x).strip()}, reverse=True)
    except ValueError as e:
        raise ImproperlyConfigured(
            f"ASSESSMENT_WARNING_THRESHOLDS must be integers (got {raw!r})"
        ) from e
    if any(v <= 0 for v in values):
        raise ImproperlyConfigured("ASSESSMENT_WARNING_THRESHOLDS must be positive")
    return tuple(values)


def load_attempt_policy() -> AttemptPolicy:
    strategy_raw = getattr(settings, "ASSESSMENT_REATTEMPT_STRATEGY", ReattemptStrategy.ABANDON_AND_INSERT.value)
    timer_raw = getattr(settings, "ASSESSMENT_RESUME_TIMER", ResumeTimerMode.ELAPSED.value)

    try:
        strategy = ReattemptStrategy(str(strategy_raw).strip().lower())
    except ValueError as e:
        raise ImproperlyConfigured(
            f"ASSESSMENT_REATTEMPT_STRATEGY must be 'abandon' or 'reset' (got {strategy_raw!r})"
        ) from e

    try:
        resume_timer = ResumeTimerMode(str(timer_raw).strip().lower())
    except ValueError as e:
        raise ImproperlyConfigured(
            f"ASSESSMENT_RESUME_TIMER must be 'elapsed' or 'full' (got {timer_raw!r})"
        ) from e

    grace_raw = getattr(settings, "ASSESSMENT_EXPIRY_GRACE_SECONDS", 5)
    try:
        grace = int(grace_raw)
    except (TypeError, ValueError) as e:
        raise ImproperlyConfigured(
            f"ASSESSMENT_EXPIRY_GRACE_SECONDS must be an integer (got {grace_raw!r})"
        ) from e
    if grace < 0:
        raise ImproperlyConfigured("ASSESSMENT_EXPIRY_GRACE_SECONDS must be >= 0")

    return AttemptPolicy(
        reattempt_strategy=strategy,
        resume_timer=resume_timer,
        lazy_expiry=_as_bool("ASSESSMENT_LAZY_EXPIRY", getattr(settings, "ASSESSMENT_LAZY_EXPIRY", False)),
        expiry_grace_seconds=grace,
        warning_thresholds=_as_thresholds(getattr(settings, "ASSESSMENT_WARNING_THRESHOLDS", None)),
    )
