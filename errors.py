"""Error taxonomy for the practicum engine.

Wrong answers are recoverable and never abort a session. Only content
integrity violations (UnsatisfiableConfiguration) are fatal, and they are
raised while the content is being built so an ungradable exercise never runs.
"""

from typing import Any


class PracticumError(Exception):
    """Base class for all engine errors."""


class RetryRequired(PracticumError):
    """A wrong answer was submitted in a sequential composite.

    The active exercise is unchanged; the caller re-prompts.
    """

    def __init__(self, exercise_id: str, outcome: Any = None):
        super().__init__(f"Exercise {exercise_id} must be retried")
        self.exercise_id = exercise_id
        self.outcome = outcome


class InvalidSelectionCount(PracticumError):
    """A multi-select submission has the wrong number of items."""

    def __init__(self, exercise_id: str, required: int, actual: int):
        super().__init__(
            f"Exercise {exercise_id} requires exactly {required} selected items, "
            f"got {actual}"
        )
        self.exercise_id = exercise_id
        self.required = required
        self.actual = actual


class IneligibleExercise(PracticumError):
    """An exercise was evaluated before its prerequisites were done."""


class UnsatisfiableConfiguration(PracticumError):
    """Exercise content can never be graded as passed."""
