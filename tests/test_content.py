"""Tests for the built-in content and JSON content loading."""

import json

import pytest
from pydantic import ValidationError

from config import AuditConfig, PracticumConfig
from content import DISTRACTOR_POOL, build_default_practicum, load_practicum, save_practicum
from errors import UnsatisfiableConfiguration
from models import NO_ISSUES, PageReviewExercise
from session import TrainingSession


class TestDefaultPracticum:
    """Integrity checks on the Doctor's Office level."""

    def test_quiz_shape(self, practicum):
        assert len(practicum.quiz_questions) == 4
        assert len(practicum.quiz_order.correct_sequence) == 5
        assert "hint" in practicum.quiz_order.metadata

    def test_call_and_binder(self, practicum):
        assert [step.id for step in practicum.call_steps] == ["call-1", "call-2", "call-3"]
        assert sorted(case.id for case in practicum.coding_cases) == ["A1", "A2", "B1", "B2"]

    def test_chart_audit_defects(self, practicum):
        audit = practicum.chart_audit
        assert len(audit.items) == 10
        assert audit.defective_ids == frozenset({"3", "5"})
        assert audit.required_count == 2

    def test_documents_have_enough_issues(self, practicum):
        pages = [page for document in practicum.documents for page in document.pages]
        assert len(practicum.documents) == 5
        assert len(pages) == 12
        assert sum(1 for page in pages if page.issue is not None) == 5

    def test_every_page_can_be_presented(self, practicum):
        for document in practicum.documents:
            for page in document.pages:
                exercise = PageReviewExercise.for_page(
                    document, page, practicum.distractor_pool
                )
                assert NO_ISSUES not in exercise.available_distractors

    def test_pool_is_a_copy(self, practicum):
        practicum.distractor_pool.append("Extra")
        assert "Extra" not in DISTRACTOR_POOL
        assert "Extra" not in build_default_practicum().distractor_pool


class TestContentFiles:
    """Tests for saving and loading content JSON."""

    def test_round_trip(self, practicum, tmp_path):
        path = tmp_path / "practicum.json"
        save_practicum(practicum, path)
        assert load_practicum(path) == practicum

    def test_schema_errors_surface(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"title": "Broken"}))
        with pytest.raises(ValidationError):
            load_practicum(path)

    def test_unsatisfiable_content_fails_at_load(self, practicum, tmp_path):
        data = json.loads(practicum.model_dump_json())
        data["chart_audit"]["items"][0]["is_defect"] = True
        path = tmp_path / "three_defects.json"
        path.write_text(json.dumps(data))

        with pytest.raises(UnsatisfiableConfiguration):
            load_practicum(path)

    def test_duplicate_exercise_ids(self, practicum, tmp_path):
        data = json.loads(practicum.model_dump_json())
        data["coding_cases"][0]["id"] = "call-1"
        path = tmp_path / "dupes.json"
        path.write_text(json.dumps(data))

        with pytest.raises(UnsatisfiableConfiguration):
            load_practicum(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_practicum(tmp_path / "missing.json")

    def test_small_distractor_pool_fails_at_load(self, practicum, tmp_path):
        data = json.loads(practicum.model_dump_json())
        data["distractor_pool"] = ["Wrong MRN"]
        path = tmp_path / "small_pool.json"
        path.write_text(json.dumps(data))

        with pytest.raises(UnsatisfiableConfiguration):
            load_practicum(path)

    def test_separator_in_ids_rejected(self, practicum, tmp_path):
        data = json.loads(practicum.model_dump_json())
        data["documents"][0]["id"] = "D1:p1"
        path = tmp_path / "bad_id.json"
        path.write_text(json.dumps(data))

        with pytest.raises(UnsatisfiableConfiguration):
            load_practicum(path)

    def test_too_few_pages_fails_at_session_start(self, practicum, tmp_path):
        data = json.loads(practicum.model_dump_json())
        data["documents"] = data["documents"][1:2]
        path = tmp_path / "one_document.json"
        path.write_text(json.dumps(data))

        loaded = load_practicum(path)
        with pytest.raises(UnsatisfiableConfiguration):
            TrainingSession(loaded)

    def test_selection_mismatch_fails_at_session_start(self, practicum):
        config = PracticumConfig(audit=AuditConfig(required_selection=3))
        with pytest.raises(UnsatisfiableConfiguration):
            TrainingSession(practicum, config)
