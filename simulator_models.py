"""Data models for the learner simulator."""

from datetime import datetime
from pydantic import BaseModel, Field

from models import Stage


class SimulatedLearnerConfig(BaseModel):
    """Configuration for a simulated learner's behavior."""

    # Slip rate: probability of picking a wrong option on any single action
    # (0.0 = perfect, 0.2 = careless, 0.5 = guessing half the time)
    slip_rate: float = Field(default=0.15, ge=0.0, le=0.9)

    # Name typed on the certificate
    name: str = "Simulated Learner"

    # Safety cap on learner actions per stage
    max_actions_per_stage: int = Field(default=500, ge=10)


class RunResult(BaseModel):
    """Result of one simulated session."""

    run: int  # 1-indexed
    finished: bool
    stages_completed: list[Stage] = Field(default_factory=list)

    quiz_score: int = 0
    quiz_max: int = 0

    attempts: int = 0
    correct_attempts: int = 0
    retries: int = 0  # RetryRequired during the phone call
    invalid_selections: int = 0  # InvalidSelectionCount on the chart audit
    ordering_moves: int = 0
    pages_judged: int = 0

    @property
    def accuracy(self) -> float:
        if self.attempts == 0:
            return 0.0
        return self.correct_attempts / self.attempts


class SimulationResults(BaseModel):
    """Complete results of a simulation run."""

    config: SimulatedLearnerConfig
    runs: int
    random_seed: int | None
    start_time: datetime
    end_time: datetime

    # Summary statistics
    completed_runs: int
    average_quiz_score: float
    average_attempts: float
    average_retries: float

    run_results: list[RunResult]
