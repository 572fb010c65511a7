"""Composite tasks: groups of exercises with their own completion rule.

- SequentialComposite: ordered single-choice steps, retried until correct
- BinderComposite: independent single-choice cases answered in any order
- AuditComposite: exact multi-select plus per-page document review

A composite is open until its completion predicate holds, then done for
good. Submissions against a done composite are still graded but never
change recorded state.
"""

from abc import ABC, abstractmethod

import structlog

from config import AuditConfig
from errors import IneligibleExercise, RetryRequired, UnsatisfiableConfiguration
from exercises.document_review import PageReviewHandler
from exercises.multi_select import MultiSelectHandler
from exercises.single_choice import SingleChoiceHandler
from models import (
    ExerciseOutcome,
    MultiSelectExercise,
    PageOption,
    PageReviewExercise,
    ReviewDocument,
    SingleChoiceExercise,
    TaskStatus,
    page_key,
)
from randomizer import Randomizer

logger = structlog.get_logger()


def ineligible(message: str, **context) -> IneligibleExercise:
    """Log an out-of-sequence call and build the error to raise."""
    logger.error("ineligible_exercise", reason=message, **context)
    return IneligibleExercise(message)


def check_audit_content(
    task_id: str,
    multi_select: MultiSelectExercise,
    documents: list[ReviewDocument],
    distractor_pool: list[str],
    config: AuditConfig,
) -> dict[str, PageReviewExercise]:
    """Build the page exercises of an audit, keyed by page.

    Raises:
        UnsatisfiableConfiguration: If the audit gate can never be met.
    """
    if multi_select.required_count != config.required_selection:
        raise UnsatisfiableConfiguration(
            f"{multi_select.id} requires {multi_select.required_count} "
            f"selections, audit expects {config.required_selection}"
        )
    pages: dict[str, PageReviewExercise] = {}
    for document in documents:
        for page in document.pages:
            exercise = PageReviewExercise.for_page(document, page, distractor_pool)
            if exercise.id in pages:
                raise UnsatisfiableConfiguration(
                    f"{task_id} has two pages keyed {exercise.id}"
                )
            pages[exercise.id] = exercise

    if len(pages) < config.required_correct_pages:
        raise UnsatisfiableConfiguration(
            f"{task_id} has {len(pages)} pages, "
            f"needs at least {config.required_correct_pages}"
        )
    return pages


class CompositeTask(ABC):
    """Base class for composite tasks."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        self.status = TaskStatus.OPEN

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    @abstractmethod
    def is_complete(self) -> bool:
        """Evaluate the completion predicate against recorded outcomes."""
        ...

    @abstractmethod
    def owns(self, exercise_id: str) -> bool:
        """Check whether `exercise_id` belongs to this composite."""
        ...

    def _refresh_status(self) -> bool:
        if not self.is_done and self.is_complete():
            self.status = TaskStatus.DONE
            logger.info("composite_done", task_id=self.task_id)
        return self.is_done


class SequentialComposite(CompositeTask):
    """Single-choice steps answered strictly in order (e.g., a phone call).

    A wrong answer raises RetryRequired and clears the selection; the active
    step does not change until it is answered correctly.
    """

    def __init__(
        self,
        task_id: str,
        exercises: list[SingleChoiceExercise],
        randomizer: Randomizer | None = None,
    ):
        super().__init__(task_id)
        if not exercises:
            raise UnsatisfiableConfiguration(f"{task_id} needs at least one step")
        self.handlers = [SingleChoiceHandler(e, randomizer) for e in exercises]
        self.active_index = 0
        self.selection: str | None = None

    @property
    def active_handler(self) -> SingleChoiceHandler | None:
        if self.active_index >= len(self.handlers):
            return None
        return self.handlers[self.active_index]

    def owns(self, exercise_id: str) -> bool:
        return any(h.exercise_id == exercise_id for h in self.handlers)

    def is_complete(self) -> bool:
        return self.active_index >= len(self.handlers)

    def select(self, answer: str) -> None:
        """Record the learner's pending choice for the active step."""
        self.selection = answer

    def submit(self, exercise_id: str, answer: str | None = None) -> ExerciseOutcome:
        """Grade the answer (or pending selection) for the active step.

        Raises:
            RetryRequired: If the answer is wrong.
            IneligibleExercise: If `exercise_id` is not the active step.
        """
        handler = self._handler_for(exercise_id)
        if answer is None:
            answer = self.selection
        if answer is None:
            raise ValueError(f"No answer selected for {exercise_id}")

        if self.is_done:
            return handler.evaluate(answer)

        if handler is not self.active_handler:
            raise ineligible(
                f"{exercise_id} is not the active step of {self.task_id}",
                task_id=self.task_id,
                exercise_id=exercise_id,
            )

        outcome = handler.evaluate(answer)
        self.selection = None
        if not outcome.passed:
            logger.debug("retry_required", task_id=self.task_id, exercise_id=exercise_id)
            raise RetryRequired(exercise_id, outcome)

        self.active_index += 1
        self._refresh_status()
        return outcome

    def _handler_for(self, exercise_id: str) -> SingleChoiceHandler:
        for handler in self.handlers:
            if handler.exercise_id == exercise_id:
                return handler
        raise ineligible(
            f"Unknown exercise {exercise_id} in {self.task_id}",
            task_id=self.task_id,
            exercise_id=exercise_id,
        )


class BinderComposite(CompositeTask):
    """Independent single-choice cases (e.g., a coding binder).

    Each case keeps its last submitted answer; re-submitting overwrites it.
    Done once every case's last submission is correct.
    """

    def __init__(
        self,
        task_id: str,
        exercises: list[SingleChoiceExercise],
        randomizer: Randomizer | None = None,
    ):
        super().__init__(task_id)
        if not exercises:
            raise UnsatisfiableConfiguration(f"{task_id} needs at least one case")
        randomizer = randomizer or Randomizer()
        self.handlers = {e.id: SingleChoiceHandler(e, randomizer) for e in exercises}
        self._order = randomizer.shuffle(list(self.handlers))
        self.answers: dict[str, str] = {}
        self.outcomes: dict[str, ExerciseOutcome] = {}

    def cases(self) -> list[SingleChoiceHandler]:
        """Return the cases in presentation order."""
        return [self.handlers[exercise_id] for exercise_id in self._order]

    def owns(self, exercise_id: str) -> bool:
        return exercise_id in self.handlers

    @property
    def correct_count(self) -> int:
        return sum(1 for outcome in self.outcomes.values() if outcome.passed)

    def is_complete(self) -> bool:
        return self.correct_count == len(self.handlers)

    def submit(self, exercise_id: str, answer: str) -> ExerciseOutcome:
        handler = self.handlers.get(exercise_id)
        if handler is None:
            raise ineligible(
                f"Unknown case {exercise_id} in {self.task_id}",
                task_id=self.task_id,
                exercise_id=exercise_id,
            )

        outcome = handler.evaluate(answer)
        if self.is_done:
            return outcome

        self.answers[exercise_id] = answer
        self.outcomes[exercise_id] = outcome
        logger.debug(
            "case_answered",
            task_id=self.task_id,
            exercise_id=exercise_id,
            passed=outcome.passed,
        )
        self._refresh_status()
        return outcome


class AuditComposite(CompositeTask):
    """Chart audit: pick the defective charts, then find issues in documents.

    Done when the last multi-select submission passed and at least
    `required_correct_pages` document pages are judged correctly. The page
    count is derived from per-page outcomes, so re-selecting a page can both
    earn and revoke credit.
    """

    def __init__(
        self,
        task_id: str,
        multi_select: MultiSelectExercise,
        documents: list[ReviewDocument],
        distractor_pool: list[str],
        config: AuditConfig | None = None,
        randomizer: Randomizer | None = None,
    ):
        super().__init__(task_id)
        self.config = config or AuditConfig()
        pages = check_audit_content(
            task_id, multi_select, documents, distractor_pool, self.config
        )

        self.checklist = MultiSelectHandler(multi_select, randomizer)
        self.documents = {document.id: document for document in documents}
        self.page_handlers: dict[str, PageReviewHandler] = {
            key: PageReviewHandler(exercise, randomizer) for key, exercise in pages.items()
        }

        self.opened_documents: list[str] = []
        self.multi_select_outcome: ExerciseOutcome | None = None
        self.page_selections: dict[str, str] = {}
        self.page_outcomes: dict[str, ExerciseOutcome] = {}

    def owns(self, exercise_id: str) -> bool:
        return exercise_id == self.checklist.exercise_id or exercise_id in self.page_handlers

    # --- Part A: exact multi-select --------------------------------------

    def toggle(self, item_id: str) -> frozenset[str]:
        if self.is_done:
            return self.checklist.selection
        return self.checklist.toggle(item_id)

    def submit_multi_select(self) -> ExerciseOutcome:
        """Grade the current chart selection.

        Raises:
            InvalidSelectionCount: If the selection size is not exactly k.
        """
        outcome = self.checklist.submit()
        if self.is_done:
            return outcome

        self.multi_select_outcome = outcome
        logger.debug("multi_select_submitted", task_id=self.task_id, passed=outcome.passed)
        self._refresh_status()
        return outcome

    @property
    def multi_select_passed(self) -> bool:
        return self.multi_select_outcome is not None and self.multi_select_outcome.passed

    # --- Part B: document review -----------------------------------------

    def open_document(self, document_id: str) -> ReviewDocument:
        document = self.documents.get(document_id)
        if document is None:
            raise ineligible(
                f"Unknown document {document_id} in {self.task_id}",
                task_id=self.task_id,
                document_id=document_id,
            )
        if document_id not in self.opened_documents:
            self.opened_documents.append(document_id)
            logger.debug("document_opened", task_id=self.task_id, document_id=document_id)
        return document

    def page_options(self, document_id: str, page_id: str) -> list[PageOption]:
        return self._page_handler(document_id, page_id).get_page_options()

    def select_page_option(
        self, document_id: str, page_id: str, option_value: str
    ) -> ExerciseOutcome:
        """Grade a page choice, replacing any earlier choice for the page."""
        handler = self._page_handler(document_id, page_id)
        if not handler.is_presented(option_value):
            raise ValueError(
                f"{option_value!r} is not an option for page {handler.exercise_id}"
            )

        outcome = handler.evaluate(option_value)
        if self.is_done:
            return outcome

        self.page_selections[handler.exercise_id] = option_value
        self.page_outcomes[handler.exercise_id] = outcome
        logger.debug(
            "page_judged",
            task_id=self.task_id,
            page=handler.exercise_id,
            passed=outcome.passed,
            pages_correct=self.pages_correct,
        )
        self._refresh_status()
        return outcome

    @property
    def pages_correct(self) -> int:
        return sum(1 for outcome in self.page_outcomes.values() if outcome.passed)

    def is_complete(self) -> bool:
        return (
            self.multi_select_passed
            and self.pages_correct >= self.config.required_correct_pages
        )

    def _page_handler(self, document_id: str, page_id: str) -> PageReviewHandler:
        key = page_key(document_id, page_id)
        handler = self.page_handlers.get(key)
        if handler is None:
            raise ineligible(
                f"Unknown page {key} in {self.task_id}",
                task_id=self.task_id,
                page=key,
            )
        if document_id not in self.opened_documents:
            raise ineligible(
                f"Document {document_id} must be opened before judging its pages",
                task_id=self.task_id,
                page=key,
            )
        return handler
