"""Configuration for the practicum engine.

These configuration models tune gating behavior, such as how many document
pages must be judged correctly or how often the randomizer may redraw an
ordering before giving up.
"""

from pydantic import BaseModel, Field


class RandomizerConfig(BaseModel):
    """Configuration for presentation randomization."""

    max_resample_attempts: int = Field(default=10, ge=1, le=1000)


class QuizConfig(BaseModel):
    """Configuration for quiz scoring."""

    points_per_question: int = Field(default=1, ge=1)


class AuditConfig(BaseModel):
    """Configuration for the chart audit gate."""

    required_selection: int = Field(default=2, ge=1)
    required_correct_pages: int = Field(default=3, ge=0)


class PracticumConfig(BaseModel):
    """Master configuration for a training session."""

    randomizer: RandomizerConfig = Field(default_factory=RandomizerConfig)
    quiz: QuizConfig = Field(default_factory=QuizConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
