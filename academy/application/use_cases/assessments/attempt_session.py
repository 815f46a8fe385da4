"""
응시 세션 컨트롤러 (탭/세션 1개 = AttemptSession 1개)

PURPOSE:
- 응시 중 UI 상태(현재 문항, 메모리 답안, 미저장 문항, 남은 시간, 자동제출 여부)를
  전역이 아닌 세션 객체 필드로 보관
- 카운트다운 → 경고(30s, 10s) → 0초에 자동 제출 1회

CONTRACT:
- 자동 제출은 auto_submitted 플래그로 1회만 시도 (0초 이후에도 tick 은 계속 올 수 있음)
- 자동 제출이 InvalidState / ConditionFailed 로 지면 정상 경합으로 보고 조용히 종료
- 그 외 저장소 오류면 플래그를 되돌려 다음 tick 에서 재시도
- 같은 세션에서 제출이 진행 중일 때의 수동 제출은 그 제출이 끝나길 기다려 결과를 공유
- 세션을 닫아도 attempt 는 IN_PROGRESS 로 남는다 (서버 측 만료 sweep 없음)

DESIGN:
- tick() 은 순수 상태 전이 (테스트에서 직접 호출)
- 실시간 구동은 CountdownThread (stop event 기반, 1초 주기)
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Optional

from academy.application.ports.repositories import AssessmentRepository, AttemptRepository
from academy.application.use_cases.assessments.record_answer import record_answer
from academy.application.use_cases.assessments.start_attempt import start_attempt
from academy.application.use_cases.assessments.submit_attempt import submit_attempt
from academy.domain.assessments.entities import Assessment, Attempt, AttemptStatus, Question
from academy.domain.assessments.errors import (
    AssessmentDomainError,
    ConditionFailed,
    InvalidState,
)
from academy.domain.assessments.policy import (
    DEFAULT_POLICY,
    AttemptPolicy,
    remaining_seconds,
    utcnow,
)

logger = logging.getLogger(__name__)

WarningCallback = Callable[[int], Any]
SubmittedCallback = Callable[[Attempt, bool], Any]


def format_remaining(seconds: Optional[int]) -> str:
    if not seconds or seconds <= 0:
        return ""
    hrs, rest = divmod(int(seconds), 3600)
    mins, secs = divmod(rest, 60)
    if hrs:
        return f"{hrs}h {mins}m {secs}s"
    if mins:
        return f"{mins}m {secs}s"
    return f"{secs}s"


def _has_value(v: Any) -> bool:
    return v is not None and v != ""


class CountdownThread:
    """on_tick 이 False 를 돌려주거나 stop() 되면 종료."""

    def __init__(
        self,
        *,
        on_tick: Callable[[], bool],
        interval: float = 1.0,
        name: str = "attempt-countdown",
    ):
        self._on_tick = on_tick
        self._interval = max(0.01, float(interval))
        self._name = name

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return

        self._thread = threading.Thread(
            target=self._run,
            name=self._name,
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=5)

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                if not self._on_tick():
                    return
            except Exception:
                # 카운트다운 스레드가 죽으면 자동 제출도 사라진다
                logger.exception("countdown tick failed name=%s", self._name)


class AttemptSession:
    def __init__(
        self,
        *,
        assessments: AssessmentRepository,
        attempts: AttemptRepository,
        assessment: Assessment,
        attempt: Attempt,
        learner_id: int,
        policy: AttemptPolicy = DEFAULT_POLICY,
        now: Optional[datetime] = None,
        on_warning: Optional[WarningCallback] = None,
        on_submitted: Optional[SubmittedCallback] = None,
    ):
        self._assessments = assessments
        self._attempts = attempts
        self._policy = policy
        self._on_warning = on_warning
        self._on_submitted = on_submitted

        self.assessment = assessment
        self.attempt = attempt
        self.learner_id = learner_id

        self.answers: dict[str, Any] = {str(k): v for k, v in (attempt.answers or {}).items()}
        self.pending: set[str] = set()
        self.question_index = 0

        self.remaining: Optional[int] = remaining_seconds(
            assessment, attempt, now or utcnow(), policy.resume_timer
        )
        self.warned: set[int] = set()
        self.auto_submitted = False
        self.submitting = False
        self.result: Optional[Attempt] = None
        self._submit_done: Optional[threading.Event] = None
        self._submit_owner: Optional[int] = None

        self._lock = threading.Lock()
        self._countdown: Optional[CountdownThread] = None

    # ------------------------------------------------------------------
    # factory
    # ------------------------------------------------------------------
    @classmethod
    def open(
        cls,
        assessments: AssessmentRepository,
        attempts: AttemptRepository,
        *,
        assessment_id: int,
        learner_id: int,
        policy: AttemptPolicy = DEFAULT_POLICY,
        now: Optional[datetime] = None,
        on_warning: Optional[WarningCallback] = None,
        on_submitted: Optional[SubmittedCallback] = None,
    ) -> "AttemptSession":
        now = now or utcnow()
        attempt = start_attempt(
            assessments,
            attempts,
            assessment_id=assessment_id,
            learner_id=learner_id,
            policy=policy,
            now=now,
        )
        assessment = assessments.get_with_questions(assessment_id)
        return cls(
            assessments=assessments,
            attempts=attempts,
            assessment=assessment,
            attempt=attempt,
            learner_id=learner_id,
            policy=policy,
            now=now,
            on_warning=on_warning,
            on_submitted=on_submitted,
        )

    # ------------------------------------------------------------------
    # state
    # ------------------------------------------------------------------
    @property
    def questions(self) -> tuple[Question, ...]:
        return self.assessment.questions

    @property
    def current_question(self) -> Optional[Question]:
        if not self.questions:
            return None
        return self.questions[self.question_index]

    @property
    def is_active(self) -> bool:
        return self.result is None and self.attempt.is_in_progress

    @property
    def answered_question_ids(self) -> set[str]:
        return {qid for qid, v in self.answers.items() if _has_value(v)}

    @property
    def unanswered_count(self) -> int:
        answered = self.answered_question_ids
        return sum(1 for q in self.questions if str(q.id) not in answered)

    # ------------------------------------------------------------------
    # answers / navigation
    # ------------------------------------------------------------------
    def set_answer(self, question_id: Any, value: Any) -> None:
        qid = str(question_id)
        self.answers[qid] = value
        self.pending.add(qid)

    def flush(self, question_id: Any = None) -> bool:
        """
        미저장 답안을 저장소에 기록 (건마다 blocking round trip).
        실패한 문항은 pending 에 남아 다음 flush / 제출 시 다시 반영된다.

        Raises InvalidState: attempt 가 이미 제출됨.
        """
        if question_id is not None:
            targets = [str(question_id)] if str(question_id) in self.pending else []
        else:
            targets = sorted(self.pending)

        ok = True
        for qid in targets:
            try:
                self.attempt = record_answer(
                    self._attempts,
                    attempt_id=self.attempt.id,
                    question_id=qid,
                    value=self.answers.get(qid),
                    learner_id=self.learner_id,
                )
                self.pending.discard(qid)
            except InvalidState:
                raise
            except AssessmentDomainError as e:
                logger.warning(
                    "answer save failed attempt_id=%s question_id=%s err=%s",
                    self.attempt.id,
                    qid,
                    e,
                )
                ok = False
        return ok

    def go_next(self) -> bool:
        """현재 문항 미응답이면 이동하지 않음 (False)."""
        q = self.current_question
        if q is None:
            return False
        if not _has_value(self.answers.get(str(q.id))):
            return False

        self.flush(q.id)
        self.question_index = min(self.question_index + 1, len(self.questions) - 1)
        return True

    def go_previous(self) -> bool:
        q = self.current_question
        if q is None:
            return False

        self.flush(q.id)
        self.question_index = max(self.question_index - 1, 0)
        return True

    # ------------------------------------------------------------------
    # timer
    # ------------------------------------------------------------------
    def tick(self, seconds: int = 1) -> Optional[Attempt]:
        """
        남은 시간 감소 + 임계값 경고 + 0초 자동 제출.
        시간 제한 없는 평가 / 종료된 세션에서는 아무것도 하지 않는다.
        """
        if self.remaining is None or not self.is_active:
            return None

        before = self.remaining
        self.remaining = max(0, before - max(0, int(seconds)))

        for threshold in self._policy.warning_thresholds:
            if threshold in self.warned:
                continue
            if before > threshold >= self.remaining and self.remaining > 0:
                self.warned.add(threshold)
                if self._on_warning is not None:
                    self._on_warning(threshold)

        if self.remaining == 0:
            return self.auto_submit()
        return None

    def start_countdown(self, interval: float = 1.0) -> None:
        if self.remaining is None or self._countdown is not None:
            return
        self._countdown = CountdownThread(
            on_tick=self._on_countdown_tick,
            interval=interval,
            name=f"attempt-countdown-{self.attempt.id}",
        )
        self._countdown.start()

    def stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.stop()
            self._countdown = None

    def _on_countdown_tick(self) -> bool:
        self.tick(1)
        return self.is_active and not self.auto_submitted

    # ------------------------------------------------------------------
    # submit
    # ------------------------------------------------------------------
    def auto_submit(self) -> Optional[Attempt]:
        with self._lock:
            if self.auto_submitted:
                return None
            self.auto_submitted = True

        in_flight, _ = self._claim_submit()
        if in_flight is not None:
            # 수동 제출이 진행 중: 그 결과를 따른다. 실패하면 다음 tick 에서 재시도
            logger.info("auto-submit deferred; submit in flight attempt_id=%s", self.attempt.id)
            with self._lock:
                self.auto_submitted = False
            return None

        logger.info("time expired; auto-submitting attempt_id=%s", self.attempt.id)
        try:
            return self._submit(auto=True)
        except (InvalidState, ConditionFailed) as e:
            # 다른 경로(수동 제출, 다른 탭)가 먼저 제출함. 정상 경합
            logger.info("auto-submit skipped attempt_id=%s reason=%s", self.attempt.id, e)
            self._adopt_stored_result()
            return None
        except AssessmentDomainError as e:
            logger.warning("auto-submit failed; retrying on next tick attempt_id=%s err=%s", self.attempt.id, e)
            with self._lock:
                self.auto_submitted = False
            return None

    def submit(self) -> Attempt:
        """
        수동 제출.
        다른 경로가 먼저 제출을 끝냈으면 저장된 완료 attempt 를 돌려준다 (사용자 오류 아님).
        같은 세션의 제출(자동 제출 등)이 진행 중이면 끝날 때까지 기다렸다가 그 결과를 쓴다.

        Raises InvalidState: COMPLETED 가 아닌 종료 상태.
        """
        while True:
            if self.result is not None:
                return self.result

            in_flight, reentrant = self._claim_submit()
            if in_flight is None:
                break
            if reentrant:
                # 진행 중인 제출과 같은 스레드: 기다리면 교착. 결과는 바깥 제출이 채운다
                logger.info("manual submit ignored during in-flight submit attempt_id=%s", self.attempt.id)
                return self.attempt
            in_flight.wait()

        try:
            return self._submit(auto=False)
        except (ConditionFailed, InvalidState):
            stored = self._adopt_stored_result()
            if stored is not None and stored.status == AttemptStatus.COMPLETED:
                logger.info("manual submit lost race; using stored result attempt_id=%s", stored.id)
                return stored
            raise

    def _claim_submit(self) -> tuple[Optional[threading.Event], bool]:
        """
        제출 권한 획득.
        획득하면 (None, False), 이미 진행 중이면 (완료 event, 같은 스레드 여부).
        """
        with self._lock:
            if self.submitting:
                return self._submit_done, self._submit_owner == threading.get_ident()
            self.submitting = True
            self._submit_owner = threading.get_ident()
            self._submit_done = threading.Event()
            return None, False

    def _submit(self, *, auto: bool) -> Attempt:
        """_claim_submit 으로 권한을 얻은 뒤에만 호출."""
        try:
            try:
                self.flush()
            except InvalidState:
                raise
            except AssessmentDomainError as e:
                # 저장 실패해도 제출은 진행 (메모리 답안이 제출 map 에 병합됨)
                logger.warning("final answer flush failed attempt_id=%s err=%s", self.attempt.id, e)

            updated = submit_attempt(
                self._assessments,
                self._attempts,
                attempt_id=self.attempt.id,
                learner_id=self.learner_id,
                answers=self.answers,
            )
            self.attempt = updated
            self.result = updated
            self.pending.clear()
            self.remaining = 0 if self.remaining is not None else None
        finally:
            with self._lock:
                self.submitting = False
                self._submit_owner = None
                done, self._submit_done = self._submit_done, None
            if done is not None:
                done.set()

        self.stop_countdown()
        if self._on_submitted is not None:
            self._on_submitted(updated, auto)
        return updated

    def _adopt_stored_result(self) -> Optional[Attempt]:
        stored = self._attempts.get(self.attempt.id)
        if stored is not None and not stored.is_in_progress:
            self.attempt = stored
            if stored.is_graded:
                self.result = stored
            return stored
        return None

    def exit(self) -> None:
        """세션 종료. attempt 는 IN_PROGRESS 로 남아 다음 start 에서 재개된다."""
        self.stop_countdown()
        logger.info("attempt session closed attempt_id=%s pending=%s", self.attempt.id, len(self.pending))
