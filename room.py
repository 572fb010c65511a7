"""The doctor's office room: a phone call, a coding binder and a chart audit.

The room is done only when all three composites are done. The call unlocks
when the ringing phone is answered; the binder and the audit unlock once the
call is finished and can then be worked in any order.
"""

from enum import Enum

import structlog

from composites import AuditComposite, BinderComposite, SequentialComposite, ineligible
from config import PracticumConfig
from models import ExerciseOutcome, PageOption, Practicum, ReviewDocument
from randomizer import Randomizer

logger = structlog.get_logger()

PHONE_CALL_ID = "phone-call"
CODING_BINDER_ID = "coding-binder"
CHART_AUDIT_ID = "chart-audit"


class RoomSignal(str, Enum):
    """Deferred one-shot signals delivered by presentation timers."""

    PHONE_HINT_DUE = "phone_hint_due"
    TASK_HINT_DUE = "task_hint_due"


class Room:
    """Room-level gate over the phone call, binder and audit composites."""

    def __init__(
        self,
        practicum: Practicum,
        config: PracticumConfig | None = None,
        randomizer: Randomizer | None = None,
    ):
        config = config or PracticumConfig()
        randomizer = randomizer or Randomizer(config=config.randomizer)

        self.phone_call = SequentialComposite(
            PHONE_CALL_ID, practicum.call_steps, randomizer
        )
        self.binder = BinderComposite(
            CODING_BINDER_ID, practicum.coding_cases, randomizer
        )
        self.audit = AuditComposite(
            CHART_AUDIT_ID,
            practicum.chart_audit,
            practicum.documents,
            practicum.distractor_pool,
            config=config.audit,
            randomizer=randomizer,
        )

        self.phone_answered = False
        self.show_phone_hint = False
        self.show_task_hints = False
        self._handled_signals: set[RoomSignal] = set()

    @property
    def composites(self) -> tuple:
        return (self.phone_call, self.binder, self.audit)

    @property
    def tasks_unlocked(self) -> bool:
        return self.phone_call.is_done

    @property
    def is_done(self) -> bool:
        return all(composite.is_done for composite in self.composites)

    # --- Phone and hints -------------------------------------------------

    def answer_phone(self) -> None:
        if not self.phone_answered:
            logger.info("phone_answered")
        self.phone_answered = True
        self.show_phone_hint = False

    def receive_signal(self, signal: RoomSignal | str) -> bool:
        """Apply a deferred signal.

        A signal whose condition no longer holds is ignored, and each signal
        takes effect at most once.

        Returns:
            True if the signal changed hint state.
        """
        signal = RoomSignal(signal)
        if signal in self._handled_signals:
            return False

        if signal == RoomSignal.PHONE_HINT_DUE and not self.phone_answered:
            self.show_phone_hint = True
        elif (
            signal == RoomSignal.TASK_HINT_DUE
            and self.tasks_unlocked
            and not (self.binder.is_done and self.audit.is_done)
        ):
            self.show_task_hints = True
        else:
            return False

        self._handled_signals.add(signal)
        logger.debug("signal_applied", signal=signal.value)
        return True

    def toggle_hints(self) -> bool:
        self.show_task_hints = not self.show_task_hints
        return self.show_task_hints

    # --- Exercise routing ------------------------------------------------

    def submit_single_choice(self, exercise_id: str, answer: str) -> ExerciseOutcome:
        if self.phone_call.owns(exercise_id):
            if not self.phone_answered:
                raise ineligible(
                    "The phone must be answered before the call starts",
                    exercise_id=exercise_id,
                )
            return self.phone_call.submit(exercise_id, answer)

        if self.binder.owns(exercise_id):
            self._require_tasks_unlocked(exercise_id)
            return self.binder.submit(exercise_id, answer)

        raise ineligible(
            f"No single-choice exercise {exercise_id} in this room",
            exercise_id=exercise_id,
        )

    def toggle_multi_select(self, task_id: str, item_id: str) -> frozenset[str]:
        self._require_audit(task_id)
        return self.audit.toggle(item_id)

    def submit_multi_select(self, task_id: str) -> ExerciseOutcome:
        self._require_audit(task_id)
        return self.audit.submit_multi_select()

    def open_document(self, document_id: str) -> ReviewDocument:
        self._require_tasks_unlocked(document_id)
        return self.audit.open_document(document_id)

    def page_options(self, document_id: str, page_id: str) -> list[PageOption]:
        self._require_tasks_unlocked(document_id)
        return self.audit.page_options(document_id, page_id)

    def select_document_page_option(
        self, document_id: str, page_id: str, option_value: str
    ) -> ExerciseOutcome:
        self._require_tasks_unlocked(document_id)
        return self.audit.select_page_option(document_id, page_id, option_value)

    def _require_audit(self, task_id: str) -> None:
        if task_id not in (CHART_AUDIT_ID, self.audit.checklist.exercise_id):
            raise ineligible(f"No multi-select task {task_id} in this room", task_id=task_id)
        self._require_tasks_unlocked(task_id)

    def _require_tasks_unlocked(self, exercise_id: str) -> None:
        if not self.tasks_unlocked:
            raise ineligible(
                "The phone call must be finished first", exercise_id=exercise_id
            )
