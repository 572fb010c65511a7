"""Quiz composite: scored single-choice questions followed by an ordering gate."""

import structlog

from composites import CompositeTask, ineligible
from config import QuizConfig
from exercises.ordering import OrderingHandler
from exercises.single_choice import SingleChoiceHandler
from models import Direction, ExerciseOutcome, OrderingExercise, SingleChoiceExercise
from randomizer import Randomizer

logger = structlog.get_logger()


class QuizComposite(CompositeTask):
    """Questions answered once each, in turn, then an ordering task.

    Each question earns points when correct and advances either way. The
    ordering task earns nothing but must be solved to finish the quiz.
    """

    def __init__(
        self,
        questions: list[SingleChoiceExercise],
        ordering: OrderingExercise,
        config: QuizConfig | None = None,
        randomizer: Randomizer | None = None,
        task_id: str = "quiz",
    ):
        super().__init__(task_id)
        self.config = config or QuizConfig()
        self.question_handlers = [SingleChoiceHandler(q, randomizer) for q in questions]
        self.ordering = OrderingHandler(ordering, randomizer)
        self.step = 0
        self.answers: list[ExerciseOutcome] = []
        self.ordering_outcome: ExerciseOutcome | None = None

    @property
    def max_score(self) -> int:
        return len(self.question_handlers) * self.config.points_per_question

    @property
    def score(self) -> int:
        return int(sum(outcome.score or 0 for outcome in self.answers))

    @property
    def on_ordering_step(self) -> bool:
        return self.step >= len(self.question_handlers) and not self.is_done

    @property
    def active_question(self) -> SingleChoiceHandler | None:
        if self.step < len(self.question_handlers):
            return self.question_handlers[self.step]
        return None

    def owns(self, exercise_id: str) -> bool:
        return exercise_id == self.ordering.exercise_id or any(
            h.exercise_id == exercise_id for h in self.question_handlers
        )

    def is_complete(self) -> bool:
        return self.ordering_outcome is not None and self.ordering_outcome.passed

    def submit_answer(self, exercise_id: str, answer: str) -> ExerciseOutcome:
        """Grade the active question and move on to the next step."""
        active = self.active_question
        if active is None or active.exercise_id != exercise_id:
            raise ineligible(
                f"{exercise_id} is not the active quiz question",
                task_id=self.task_id,
                exercise_id=exercise_id,
            )

        outcome = active.evaluate(answer)
        points = self.config.points_per_question if outcome.passed else 0
        outcome = outcome.model_copy(update={"score": float(points)})
        self.answers.append(outcome)
        self.step += 1
        logger.debug(
            "quiz_answer",
            exercise_id=exercise_id,
            passed=outcome.passed,
            score=self.score,
        )
        return outcome

    def move_item(self, task_id: str, index: int, direction: Direction | str) -> list[str]:
        self._require_ordering(task_id)
        return self.ordering.move(index, direction)

    def submit_ordering(self, task_id: str) -> ExerciseOutcome:
        self._require_ordering(task_id)
        outcome = self.ordering.submit()
        if outcome.passed:
            self.ordering_outcome = outcome
            self._refresh_status()
        return outcome

    def _require_ordering(self, task_id: str) -> None:
        if task_id != self.ordering.exercise_id:
            raise ineligible(
                f"Unknown ordering task {task_id}", task_id=self.task_id
            )
        if not self.on_ordering_step:
            raise ineligible(
                f"{task_id} is not active yet",
                task_id=self.task_id,
                step=self.step,
            )
