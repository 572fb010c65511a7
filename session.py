"""Session state machine: Quiz -> Room -> Certificate -> Done.

The session is the engine's only call surface. It routes learner actions to
the composite that owns them in the current stage, records every graded
outcome, and notifies subscribers when a stage completes. Stage state is
discarded on exit; only the score summary is carried forward.
"""

from typing import Any, Callable

import structlog

from composites import check_audit_content, ineligible
from config import PracticumConfig
from content import build_default_practicum
from errors import RetryRequired
from models import Direction, ExerciseOutcome, PageOption, Practicum, ReviewDocument, Stage
from quiz import QuizComposite
from randomizer import Randomizer
from room import CHART_AUDIT_ID, Room, RoomSignal
from scoring import ScoreAggregator, ScoreSummary

logger = structlog.get_logger()

StageListener = Callable[[Stage, Any], None]


class TrainingSession:
    """Drives one learner through every stage of a practicum."""

    def __init__(
        self,
        practicum: Practicum | None = None,
        config: PracticumConfig | None = None,
        randomizer: Randomizer | None = None,
    ):
        self.practicum = practicum or build_default_practicum()
        self.config = config or PracticumConfig()
        self.randomizer = randomizer or Randomizer(config=self.config.randomizer)
        check_audit_content(
            CHART_AUDIT_ID,
            self.practicum.chart_audit,
            self.practicum.documents,
            self.practicum.distractor_pool,
            self.config.audit,
        )

        self.stage = Stage.QUIZ
        self.quiz: QuizComposite | None = QuizComposite(
            self.practicum.quiz_questions,
            self.practicum.quiz_order,
            config=self.config.quiz,
            randomizer=self.randomizer,
        )
        self.room: Room | None = None
        self.certificate_name: str | None = None

        self.aggregator = ScoreAggregator(quiz_max=self.quiz.max_score)
        self.stage_summaries: dict[Stage, ScoreSummary] = {}
        self._listeners: list[StageListener] = []

    def subscribe(self, listener: StageListener) -> None:
        """Register `listener(stage, payload)` for stage completions.

        Payload is the quiz score for QUIZ, None for ROOM and the certificate
        name for CERTIFICATE.
        """
        self._listeners.append(listener)

    @property
    def is_finished(self) -> bool:
        return self.stage == Stage.DONE

    @property
    def summary(self) -> ScoreSummary:
        return self.aggregator.summary()

    # --- Quiz ------------------------------------------------------------

    def move_ordering_item(
        self, task_id: str, index: int, direction: Direction | str
    ) -> list[str]:
        return self._require_quiz(task_id).move_item(task_id, index, direction)

    def submit_ordering(self, task_id: str) -> ExerciseOutcome:
        quiz = self._require_quiz(task_id)
        outcome = quiz.submit_ordering(task_id)
        self._record(outcome)
        if quiz.is_done:
            self._complete_stage(quiz.score)
        return outcome

    # --- Single choice (quiz, phone call, coding binder) -----------------

    def submit_single_choice(self, exercise_id: str, answer: str) -> ExerciseOutcome:
        """Grade a single-choice answer in the current stage.

        Raises:
            RetryRequired: On a wrong answer during the phone call.
            IneligibleExercise: If the exercise is not answerable now.
        """
        if self.stage == Stage.QUIZ:
            outcome = self._require_quiz(exercise_id).submit_answer(exercise_id, answer)
            self._record(outcome)
            return outcome

        room = self._require_room(exercise_id)
        try:
            outcome = room.submit_single_choice(exercise_id, answer)
        except RetryRequired as exc:
            if exc.outcome is not None:
                self._record(exc.outcome)
            raise
        self._record(outcome)
        self._check_room()
        return outcome

    # --- Room ------------------------------------------------------------

    def answer_phone(self) -> None:
        self._require_room("phone").answer_phone()

    def receive_signal(self, signal: RoomSignal | str) -> bool:
        """Deliver a deferred presentation signal; ignored outside the room."""
        if self.room is None:
            return False
        return self.room.receive_signal(signal)

    def toggle_multi_select(self, task_id: str, item_id: str) -> frozenset[str]:
        return self._require_room(task_id).toggle_multi_select(task_id, item_id)

    def submit_multi_select(self, task_id: str) -> ExerciseOutcome:
        """Grade the chart selection.

        Raises:
            InvalidSelectionCount: If the selection is not exactly k charts.
        """
        outcome = self._require_room(task_id).submit_multi_select(task_id)
        self._record(outcome)
        self._check_room()
        return outcome

    def open_document(self, document_id: str) -> ReviewDocument:
        return self._require_room(document_id).open_document(document_id)

    def page_options(self, document_id: str, page_id: str) -> list[PageOption]:
        return self._require_room(document_id).page_options(document_id, page_id)

    def select_document_page_option(
        self, document_id: str, page_id: str, option_value: str
    ) -> ExerciseOutcome:
        room = self._require_room(document_id)
        outcome = room.select_document_page_option(document_id, page_id, option_value)
        self._record(outcome)
        self._check_room()
        return outcome

    # --- Certificate -----------------------------------------------------

    def submit_certificate_name(self, name: str) -> None:
        if self.stage != Stage.CERTIFICATE:
            raise ineligible(
                "Certificate is not available yet", stage=self.stage.value
            )
        name = name.strip()
        if not name:
            raise ValueError("Certificate name cannot be blank")
        self.certificate_name = name
        self._complete_stage(name)

    # --- Internals -------------------------------------------------------

    def _require_quiz(self, exercise_id: str) -> QuizComposite:
        if self.stage != Stage.QUIZ or self.quiz is None:
            raise ineligible(
                f"{exercise_id} belongs to the quiz, current stage is {self.stage.value}",
                exercise_id=exercise_id,
            )
        return self.quiz

    def _require_room(self, exercise_id: str) -> Room:
        if self.stage != Stage.ROOM or self.room is None:
            raise ineligible(
                f"{exercise_id} belongs to the room, current stage is {self.stage.value}",
                exercise_id=exercise_id,
            )
        return self.room

    def _record(self, outcome: ExerciseOutcome) -> None:
        self.aggregator.record(self.stage, outcome)

    def _check_room(self) -> None:
        if self.room is not None and self.room.is_done:
            self._complete_stage(None)

    def _complete_stage(self, payload: Any) -> None:
        completed = self.stage

        # The next stage is built before any current state is dropped
        if completed == Stage.QUIZ:
            self.room = Room(self.practicum, self.config, self.randomizer)
            self.quiz = None
        elif completed == Stage.ROOM:
            self.room = None
        self.stage_summaries[completed] = self.aggregator.summary()

        self.stage = completed.next_stage()
        logger.info(
            "stage_complete",
            stage=completed.value,
            next_stage=self.stage.value,
            payload=payload,
        )

        for listener in list(self._listeners):
            listener(completed, payload)
