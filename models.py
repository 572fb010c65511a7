from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from errors import UnsatisfiableConfiguration

# Option value shown on every document page; correct when the page is clean.
NO_ISSUES = "No issues on this page"

# Joins document and page ids in page keys; not allowed inside either id.
PAGE_KEY_SEPARATOR = ":"


class Stage(str, Enum):
    QUIZ = "quiz"
    ROOM = "room"
    CERTIFICATE = "certificate"
    DONE = "done"

    def next_stage(self) -> "Stage":
        """Return the stage that follows this one (DONE is terminal)."""
        order = list(Stage)
        index = order.index(self)
        return order[min(index + 1, len(order) - 1)]


class TaskStatus(str, Enum):
    OPEN = "open"
    DONE = "done"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


# ============================================================================
# Exercise Models
# ============================================================================


class Exercise(BaseModel):
    """Base class for all gradable exercises."""

    id: str
    prompt: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class SingleChoiceExercise(Exercise):
    """Pick one answer from a set of unique candidates."""

    choices: list[str]
    correct: str

    @model_validator(mode="after")
    def check_choices(self) -> "SingleChoiceExercise":
        if len(set(self.choices)) != len(self.choices):
            raise UnsatisfiableConfiguration(
                f"Exercise {self.id} has duplicate choices"
            )
        if self.correct not in self.choices:
            raise UnsatisfiableConfiguration(
                f"Exercise {self.id}: correct answer is not among the choices"
            )
        return self


class OrderingExercise(Exercise):
    """Arrange items into a fixed correct sequence."""

    correct_sequence: list[str]

    @model_validator(mode="after")
    def check_sequence(self) -> "OrderingExercise":
        if not self.correct_sequence:
            raise UnsatisfiableConfiguration(f"Exercise {self.id} has no items")
        if len(set(self.correct_sequence)) != len(self.correct_sequence):
            raise UnsatisfiableConfiguration(
                f"Exercise {self.id} has duplicate items"
            )
        return self


class ChecklistItem(BaseModel):
    """One row of a multi-select universe (e.g., a chart in an audit)."""

    id: str
    label: str
    is_defect: bool = False


class MultiSelectExercise(Exercise):
    """Select exactly `required_count` items: the defective ones."""

    items: list[ChecklistItem]
    required_count: int = Field(default=2, ge=1)

    @model_validator(mode="after")
    def check_defects(self) -> "MultiSelectExercise":
        ids = [item.id for item in self.items]
        if len(set(ids)) != len(ids):
            raise UnsatisfiableConfiguration(
                f"Exercise {self.id} has duplicate item ids"
            )
        defect_count = len(self.defective_ids)
        if defect_count != self.required_count:
            raise UnsatisfiableConfiguration(
                f"Exercise {self.id} needs exactly {self.required_count} "
                f"defective items, found {defect_count}"
            )
        return self

    @property
    def defective_ids(self) -> frozenset[str]:
        return frozenset(item.id for item in self.items if item.is_defect)

    def get_item(self, item_id: str) -> ChecklistItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


class PageIssue(BaseModel):
    """A labeled defect on a document page."""

    id: str
    label: str


class DocumentPage(BaseModel):
    """A single page of a review document; at most one real issue."""

    id: str
    title: str
    body: str = ""
    issue: PageIssue | None = None

    @model_validator(mode="after")
    def check_page(self) -> "DocumentPage":
        if PAGE_KEY_SEPARATOR in self.id:
            raise UnsatisfiableConfiguration(
                f"Page id {self.id!r} may not contain {PAGE_KEY_SEPARATOR!r}"
            )
        if self.issue is not None and self.issue.label == NO_ISSUES:
            raise UnsatisfiableConfiguration(
                f"Page {self.id}: issue label collides with the no-issues option"
            )
        return self

    @property
    def distractors_needed(self) -> int:
        """Distractors shown next to NO_ISSUES (one beside a real issue)."""
        return 1 if self.issue is not None else 2


class ReviewDocument(BaseModel):
    """An ordered sequence of pages the learner inspects for issues."""

    id: str
    title: str
    pages: list[DocumentPage]

    @model_validator(mode="after")
    def check_pages(self) -> "ReviewDocument":
        if PAGE_KEY_SEPARATOR in self.id:
            raise UnsatisfiableConfiguration(
                f"Document id {self.id!r} may not contain {PAGE_KEY_SEPARATOR!r}"
            )
        if not self.pages:
            raise UnsatisfiableConfiguration(f"Document {self.id} has no pages")
        ids = [page.id for page in self.pages]
        if len(set(ids)) != len(ids):
            raise UnsatisfiableConfiguration(
                f"Document {self.id} has duplicate page ids"
            )
        return self

    def get_page(self, page_id: str) -> DocumentPage | None:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None


def page_key(document_id: str, page_id: str) -> str:
    """Composite id of a document page (e.g., 'D1:p3')."""
    return f"{document_id}{PAGE_KEY_SEPARATOR}{page_id}"


class PageReviewExercise(Exercise):
    """Judge one document page: name its real issue or declare it clean."""

    document_id: str
    page: DocumentPage
    distractor_pool: list[str]

    @model_validator(mode="after")
    def check_pool(self) -> "PageReviewExercise":
        if len(self.available_distractors) < self.page.distractors_needed:
            raise UnsatisfiableConfiguration(
                f"Page {self.id} needs {self.page.distractors_needed} distractors, "
                f"pool offers {len(self.available_distractors)}"
            )
        return self

    @property
    def available_distractors(self) -> list[str]:
        """Pool labels that may be shown as wrong options on this page."""
        excluded = {NO_ISSUES}
        if self.page.issue is not None:
            excluded.add(self.page.issue.label)
        seen: list[str] = []
        for label in self.distractor_pool:
            if label not in excluded and label not in seen:
                seen.append(label)
        return seen

    @classmethod
    def for_page(
        cls, document: ReviewDocument, page: DocumentPage, distractor_pool: list[str]
    ) -> "PageReviewExercise":
        return cls(
            id=page_key(document.id, page.id),
            prompt=f"{document.title}: {page.title}",
            document_id=document.id,
            page=page,
            distractor_pool=distractor_pool,
        )


class PageOption(BaseModel):
    """An option presented for a document page."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: str


# ============================================================================
# Outcomes and Content
# ============================================================================


class ExerciseOutcome(BaseModel):
    """Result of grading one submission. Immutable once recorded."""

    model_config = ConfigDict(frozen=True)

    exercise_id: str
    passed: bool
    score: float | None = None


class Practicum(BaseModel):
    """The complete content bundle for one training level."""

    title: str
    quiz_questions: list[SingleChoiceExercise]
    quiz_order: OrderingExercise
    call_steps: list[SingleChoiceExercise]
    coding_cases: list[SingleChoiceExercise]
    chart_audit: MultiSelectExercise
    documents: list[ReviewDocument]
    distractor_pool: list[str]

    @model_validator(mode="after")
    def check_ids(self) -> "Practicum":
        exercise_ids = [
            exercise.id
            for exercise in [
                *self.quiz_questions,
                self.quiz_order,
                *self.call_steps,
                *self.coding_cases,
                self.chart_audit,
            ]
        ]
        if len(set(exercise_ids)) != len(exercise_ids):
            raise UnsatisfiableConfiguration("Exercise ids must be unique")

        document_ids = [document.id for document in self.documents]
        if len(set(document_ids)) != len(document_ids):
            raise UnsatisfiableConfiguration("Document ids must be unique")

        if not self.call_steps:
            raise UnsatisfiableConfiguration("The phone call needs at least one step")
        if not self.coding_cases:
            raise UnsatisfiableConfiguration("The coding binder needs at least one case")
        return self

    @model_validator(mode="after")
    def check_distractors(self) -> "Practicum":
        # Each page exercise validates its own share of the pool
        for document in self.documents:
            for page in document.pages:
                PageReviewExercise.for_page(document, page, self.distractor_pool)
        return self
