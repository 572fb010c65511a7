"""Score aggregation across a training session."""

from pydantic import BaseModel, ConfigDict, Field

from models import ExerciseOutcome, Stage


class StageTally(BaseModel):
    """Attempt counts for one stage."""

    model_config = ConfigDict(frozen=True)

    attempts: int = 0
    correct: int = 0


class ScoreSummary(BaseModel):
    """Immutable snapshot handed forward at stage boundaries."""

    model_config = ConfigDict(frozen=True)

    quiz_points: int = 0
    quiz_max: int = 0
    attempts: int = 0
    correct_attempts: int = 0
    stages: dict[Stage, StageTally] = Field(default_factory=dict)

    @property
    def accuracy(self) -> float:
        if self.attempts == 0:
            return 0.0
        return self.correct_attempts / self.attempts


class ScoreAggregator:
    """Accumulates exercise outcomes in the order they were recorded."""

    def __init__(self, quiz_max: int = 0):
        self.quiz_max = quiz_max
        self._records: list[tuple[Stage, ExerciseOutcome]] = []

    def record(self, stage: Stage, outcome: ExerciseOutcome) -> None:
        self._records.append((stage, outcome))

    def outcomes(self, stage: Stage | None = None) -> list[ExerciseOutcome]:
        return [
            outcome
            for recorded_stage, outcome in self._records
            if stage is None or recorded_stage == stage
        ]

    @property
    def quiz_points(self) -> int:
        # Only outcomes carrying a score contribution count (choice questions).
        return int(
            sum(
                outcome.score
                for outcome in self.outcomes(Stage.QUIZ)
                if outcome.score is not None
            )
        )

    def summary(self) -> ScoreSummary:
        stages: dict[Stage, StageTally] = {}
        for stage in Stage:
            outcomes = self.outcomes(stage)
            if outcomes:
                stages[stage] = StageTally(
                    attempts=len(outcomes),
                    correct=sum(1 for outcome in outcomes if outcome.passed),
                )

        return ScoreSummary(
            quiz_points=self.quiz_points,
            quiz_max=self.quiz_max,
            attempts=len(self._records),
            correct_attempts=sum(1 for _, outcome in self._records if outcome.passed),
            stages=stages,
        )
