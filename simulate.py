"""Core simulation logic for the learner simulator.

A simulated learner plays complete sessions through the same call surface the
terminal UI uses, slipping on individual actions at a configurable rate.
"""

import json
import random
from datetime import datetime
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table

from config import PracticumConfig
from content import build_default_practicum
from errors import InvalidSelectionCount, RetryRequired
from exercises import correct_option_for
from models import Direction, Practicum, Stage, page_key
from randomizer import Randomizer
from session import TrainingSession
from simulator_models import RunResult, SimulatedLearnerConfig, SimulationResults


class ResponseGenerator:
    """Generates simulated learner choices."""

    def __init__(self, config: SimulatedLearnerConfig, rng: random.Random):
        self.config = config
        self.rng = rng

    def slips(self) -> bool:
        return self.rng.random() < self.config.slip_rate

    def choose(self, options: list[str], correct: str) -> str:
        """Pick the correct option unless the learner slips."""
        wrong = [option for option in options if option != correct]
        if wrong and self.slips():
            return self.rng.choice(wrong)
        return correct


class Simulator:
    """Runs simulated learners through full sessions."""

    def __init__(
        self,
        config: SimulatedLearnerConfig,
        practicum: Practicum | None = None,
        practicum_config: PracticumConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config
        self.practicum = practicum or build_default_practicum()
        self.practicum_config = practicum_config or PracticumConfig()
        self.rng = rng or random.Random()
        self.responder = ResponseGenerator(config, self.rng)

    def run(self, runs: int, verbose: bool = False) -> SimulationResults:
        start_time = datetime.now()
        run_results = [self.play_session(n, verbose) for n in range(1, runs + 1)]
        end_time = datetime.now()

        def average(values: list[float]) -> float:
            return sum(values) / len(values) if values else 0.0

        return SimulationResults(
            config=self.config,
            runs=runs,
            random_seed=None,  # Set by caller if applicable
            start_time=start_time,
            end_time=end_time,
            completed_runs=sum(1 for r in run_results if r.finished),
            average_quiz_score=average([r.quiz_score for r in run_results]),
            average_attempts=average([r.attempts for r in run_results]),
            average_retries=average([r.retries for r in run_results]),
            run_results=run_results,
        )

    def play_session(self, run_number: int, verbose: bool = False) -> RunResult:
        """Play one session from the quiz to the certificate."""
        randomizer = Randomizer(
            random.Random(self.rng.getrandbits(32)),
            config=self.practicum_config.randomizer,
        )
        session = TrainingSession(self.practicum, self.practicum_config, randomizer)
        result = RunResult(run=run_number, finished=False)

        def on_stage_complete(stage: Stage, payload) -> None:
            result.stages_completed.append(stage)
            if stage == Stage.QUIZ:
                result.quiz_score = payload
            if verbose:
                print(f"  Run {run_number}: {stage.value} complete ({payload})")

        session.subscribe(on_stage_complete)
        result.quiz_max = session.aggregator.quiz_max

        self._play_quiz(session, result)
        if session.stage == Stage.ROOM:
            self._play_room(session, result)
        if session.stage == Stage.CERTIFICATE:
            session.submit_certificate_name(self.config.name)

        summary = session.summary
        result.attempts = summary.attempts
        result.correct_attempts = summary.correct_attempts
        result.finished = session.is_finished
        return result

    # --- Quiz ------------------------------------------------------------

    def _play_quiz(self, session: TrainingSession, result: RunResult) -> None:
        quiz = session.quiz
        assert quiz is not None

        while quiz.active_question is not None:
            handler = quiz.active_question
            answer = self.responder.choose(handler.get_options(), handler.exercise.correct)
            session.submit_single_choice(handler.exercise_id, answer)

        task_id = quiz.ordering.exercise_id
        correct = quiz.ordering.exercise.correct_sequence
        for _ in range(self.config.max_actions_per_stage):
            if quiz.ordering.is_solved:
                session.submit_ordering(task_id)
                return
            working = quiz.ordering.working_sequence
            if self.responder.slips():
                index = self.rng.randrange(len(working))
                direction = self.rng.choice(list(Direction))
            else:
                # Bubble the first misplaced item's rightful occupant up by one
                first_wrong = next(i for i, item in enumerate(working) if item != correct[i])
                index = working.index(correct[first_wrong])
                direction = Direction.UP
            session.move_ordering_item(task_id, index, direction)
            result.ordering_moves += 1

    # --- Room ------------------------------------------------------------

    def _play_room(self, session: TrainingSession, result: RunResult) -> None:
        room = session.room
        assert room is not None
        session.answer_phone()
        budget = self.config.max_actions_per_stage

        def in_room() -> bool:
            return session.stage == Stage.ROOM and budget > 0

        while in_room() and not room.phone_call.is_done:
            budget -= 1
            handler = room.phone_call.active_handler
            answer = self.responder.choose(handler.get_options(), handler.exercise.correct)
            try:
                session.submit_single_choice(handler.exercise_id, answer)
            except RetryRequired:
                result.retries += 1

        for handler in room.binder.cases():
            while in_room() and not self._case_passed(room, handler.exercise_id):
                budget -= 1
                answer = self.responder.choose(handler.get_options(), handler.exercise.correct)
                session.submit_single_choice(handler.exercise_id, answer)

        audit = room.audit
        task_id = audit.checklist.exercise_id
        while in_room() and not audit.multi_select_passed:
            budget -= 1
            self._select_charts(session, audit, task_id)
            try:
                session.submit_multi_select(task_id)
            except InvalidSelectionCount:
                result.invalid_selections += 1

        while in_room():
            for document in self.practicum.documents:
                if not in_room():
                    break
                session.open_document(document.id)
                for page in document.pages:
                    if not in_room():
                        break
                    outcome = audit.page_outcomes.get(page_key(document.id, page.id))
                    if outcome is not None and outcome.passed:
                        continue
                    budget -= 1
                    values = [o.value for o in session.page_options(document.id, page.id)]
                    value = self.responder.choose(values, correct_option_for(page))
                    session.select_document_page_option(document.id, page.id, value)
                    result.pages_judged += 1

    @staticmethod
    def _case_passed(room, exercise_id: str) -> bool:
        outcome = room.binder.outcomes.get(exercise_id)
        return outcome is not None and outcome.passed

    def _select_charts(self, session: TrainingSession, audit, task_id: str) -> None:
        """Toggle charts until the selection matches the learner's picks."""
        items = audit.checklist.get_items()
        picks = {item.id for item in items if item.is_defect}
        clean = [item.id for item in items if not item.is_defect]
        if clean and self.responder.slips():
            picks.discard(self.rng.choice(sorted(picks)))
            picks.add(self.rng.choice(clean))
            if self.responder.slips():
                picks.add(self.rng.choice(clean))

        current = audit.checklist.selection
        for item_id in sorted(current ^ picks):
            session.toggle_multi_select(task_id, item_id)


def print_console_summary(results: SimulationResults, console: Console | None = None) -> None:
    """Print formatted console summary of simulation results."""
    console = console or Console()

    console.print()
    console.print("=" * 60, style="bold blue")
    console.print("                SIMULATION COMPLETE", style="bold blue")
    console.print("=" * 60, style="bold blue")
    console.print()
    console.print(f"Runs:               {results.runs}")
    console.print(f"Slip rate:          {results.config.slip_rate:.2f}")
    console.print(f"Completed runs:     {results.completed_runs} / {results.runs}")
    console.print(f"Average quiz score: {results.average_quiz_score:.2f}")
    console.print(f"Average attempts:   {results.average_attempts:.1f}")
    console.print(f"Average retries:    {results.average_retries:.1f}")
    console.print()

    table = Table(box=box.SIMPLE, header_style="bold")
    table.add_column("Run", justify="right")
    table.add_column("Quiz", justify="right")
    table.add_column("Attempts", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Retries", justify="right")
    table.add_column("Moves", justify="right")
    table.add_column("Finished", justify="center")

    for run in results.run_results:
        table.add_row(
            str(run.run),
            f"{run.quiz_score}/{run.quiz_max}",
            str(run.attempts),
            f"{run.accuracy * 100:.0f}%",
            str(run.retries),
            str(run.ordering_moves),
            "yes" if run.finished else "no",
        )

    console.print(table)


def save_json_results(results: SimulationResults, output_path: Path) -> None:
    """Save simulation results to JSON file."""
    data = json.loads(results.model_dump_json())

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2, default=str)


def run_simulation_and_report(
    config: SimulatedLearnerConfig,
    runs: int,
    output_path: Path,
    verbose: bool = False,
    seed: int | None = None,
    practicum: Practicum | None = None,
    console: Console | None = None,
) -> SimulationResults:
    """Run simulation and generate all outputs."""
    rng = random.Random(seed)

    simulator = Simulator(config, practicum=practicum, rng=rng)
    results = simulator.run(runs, verbose)
    results.random_seed = seed

    print_console_summary(results, console)

    save_json_results(results, output_path)
    (console or Console()).print(f"Results saved to: {output_path}")

    return results
