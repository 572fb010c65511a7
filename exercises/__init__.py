"""Exercise engine for the practicum trainer.

This package grades single exercise instances. It knows nothing about
composite tasks or stages; those live in composites.py, quiz.py, room.py and
session.py.

Exercise kinds:
- SingleChoiceExercise: pick the one correct answer
- OrderingExercise: arrange steps with adjacent swaps
- MultiSelectExercise: select exactly k defective items
- PageReviewExercise: judge one document page (real issue or "no issues")

Handlers:
- SingleChoiceHandler, OrderingHandler, MultiSelectHandler, PageReviewHandler

Entry point:
- evaluate(exercise, learner_input) -> ExerciseOutcome
"""

from typing import Any

from models import (
    Exercise,
    ExerciseOutcome,
    MultiSelectExercise,
    OrderingExercise,
    PageReviewExercise,
    SingleChoiceExercise,
)
from exercises.base import ExerciseHandler, parse_letter_input
from exercises.document_review import PageReviewHandler, correct_option_for
from exercises.multi_select import MultiSelectHandler
from exercises.ordering import OrderingHandler
from exercises.single_choice import SingleChoiceHandler

# Registry of exercise handler classes
EXERCISE_HANDLERS: dict[type[Exercise], type[ExerciseHandler]] = {
    SingleChoiceExercise: SingleChoiceHandler,
    OrderingExercise: OrderingHandler,
    MultiSelectExercise: MultiSelectHandler,
    PageReviewExercise: PageReviewHandler,
}


def get_exercise_handler(exercise: Exercise) -> type[ExerciseHandler]:
    """Get the handler class for the given exercise instance."""
    for exercise_type, handler_class in EXERCISE_HANDLERS.items():
        if isinstance(exercise, exercise_type):
            return handler_class
    raise TypeError(f"No handler registered for {type(exercise).__name__}")


def evaluate(exercise: Exercise, learner_input: Any) -> ExerciseOutcome:
    """Grade `learner_input` against `exercise`."""
    handler = get_exercise_handler(exercise)(exercise)
    return handler.evaluate(learner_input)


__all__ = [
    # Utilities
    "parse_letter_input",
    "correct_option_for",
    # Engine
    "EXERCISE_HANDLERS",
    "get_exercise_handler",
    "evaluate",
    # Handlers
    "ExerciseHandler",
    "SingleChoiceHandler",
    "OrderingHandler",
    "MultiSelectHandler",
    "PageReviewHandler",
]
