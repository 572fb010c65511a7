"""Shared pytest fixtures for the practicum trainer test suite."""

import random
import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from content import build_default_practicum
from models import (
    ChecklistItem,
    DocumentPage,
    MultiSelectExercise,
    OrderingExercise,
    PageIssue,
    Practicum,
    ReviewDocument,
    SingleChoiceExercise,
)
from randomizer import Randomizer
from session import TrainingSession
from simulator_models import SimulatedLearnerConfig


@pytest.fixture
def randomizer() -> Randomizer:
    """Create a seeded randomizer for reproducible presentation order."""
    return Randomizer(random.Random(1234))


@pytest.fixture
def practicum() -> Practicum:
    """Create the built-in Doctor's Office practicum."""
    return build_default_practicum()


@pytest.fixture
def session(practicum, randomizer) -> TrainingSession:
    """Create a fresh training session on the default content."""
    return TrainingSession(practicum, randomizer=randomizer)


@pytest.fixture
def single_choice() -> SingleChoiceExercise:
    """Create a sample single-choice question."""
    return SingleChoiceExercise(
        id="sc1",
        prompt="Which identifier pair verifies a caller?",
        choices=["Name + DOB", "Group number", "Provider NPI", "Zip code"],
        correct="Name + DOB",
    )


@pytest.fixture
def ordering_exercise() -> OrderingExercise:
    """Create a sample ordering exercise with four steps."""
    return OrderingExercise(
        id="ord1",
        prompt="Put the steps in order",
        correct_sequence=["verify", "authorize", "scope", "log"],
    )


@pytest.fixture
def checklist() -> MultiSelectExercise:
    """Create a five-chart audit with two defective charts."""
    return MultiSelectExercise(
        id="audit1",
        prompt="Select the two non-compliant charts",
        items=[
            ChecklistItem(id="c1", label="Chart 1: complete"),
            ChecklistItem(id="c2", label="Chart 2: unsigned", is_defect=True),
            ChecklistItem(id="c3", label="Chart 3: complete"),
            ChecklistItem(id="c4", label="Chart 4: wrong DOB", is_defect=True),
            ChecklistItem(id="c5", label="Chart 5: complete"),
        ],
        required_count=2,
    )


@pytest.fixture
def review_document() -> ReviewDocument:
    """Create a two-page document with one issue on page 2."""
    return ReviewDocument(
        id="DX",
        title="DX: Referral",
        pages=[
            DocumentPage(id="p1", title="Header", body="Patient: A. Test"),
            DocumentPage(
                id="p2",
                title="Signature",
                body="Signed: ______",
                issue=PageIssue(id="i1", label="Missing provider signature"),
            ),
        ],
    )


@pytest.fixture
def distractor_pool() -> list[str]:
    """Create a distractor pool that overlaps one real issue label."""
    return [
        "Wrong MRN",
        "Missing provider signature",
        "DOB mismatch vs. request",
        "Scope exceeds authorization",
    ]


@pytest.fixture
def careful_learner_config() -> SimulatedLearnerConfig:
    """Create a learner that never slips."""
    return SimulatedLearnerConfig(slip_rate=0.0, name="Careful Learner")


@pytest.fixture
def careless_learner_config() -> SimulatedLearnerConfig:
    """Create a learner that slips often."""
    return SimulatedLearnerConfig(slip_rate=0.4, name="Careless Learner")
