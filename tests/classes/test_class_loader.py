import json
from pathlib import Path

import pytest

from playmode.classes.loader import ClassFileError, load_class_plan

SAMPLE_CLASS = Path(__file__).parents[2] / "sample_classes" / "core_blast.yaml"


def test_loads_sample_class():
    plan = load_class_plan(SAMPLE_CLASS)

    assert plan.name == "Core Blast 30"
    assert plan.transition_seconds == 10
    assert [step.duration_seconds for step in plan.to_steps()] == [120, 45, 40, 90]


def test_loads_json_class(tmp_path):
    path = tmp_path / "class.json"
    path.write_text(
        json.dumps({"name": "Quick Abs", "workouts": [{"id": 1, "workout_name": "Crunches", "default_duration": 30}]}),
        encoding="utf-8",
    )

    plan = load_class_plan(path)

    assert plan.name == "Quick Abs"
    assert plan.to_steps()[0].id == "1"


def test_unsupported_extension(tmp_path):
    path = tmp_path / "class.txt"
    path.write_text("name: Nope", encoding="utf-8")

    with pytest.raises(ClassFileError, match="Unsupported class file type"):
        load_class_plan(path)


def test_missing_file(tmp_path):
    with pytest.raises(ClassFileError, match="Cannot read class file") as exc_info:
        load_class_plan(tmp_path / "missing.yaml")

    assert exc_info.value.code == "INVALID_CLASS_FILE"


def test_malformed_yaml(tmp_path):
    path = tmp_path / "class.yaml"
    path.write_text("name: [unclosed", encoding="utf-8")

    with pytest.raises(ClassFileError, match="Cannot parse class file"):
        load_class_plan(path)


def test_malformed_json(tmp_path):
    path = tmp_path / "class.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ClassFileError, match="Cannot parse class file"):
        load_class_plan(path)


def test_top_level_must_be_mapping(tmp_path):
    path = tmp_path / "class.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ClassFileError, match="must contain a mapping"):
        load_class_plan(path)


def test_schema_errors_are_listed(tmp_path):
    path = tmp_path / "class.yaml"
    path.write_text("workouts:\n  - workout_name: Squats\n    default_duration: lots\n", encoding="utf-8")

    with pytest.raises(ClassFileError, match="Invalid class file") as exc_info:
        load_class_plan(path)

    details = exc_info.value.details
    assert any(detail.startswith("name:") for detail in details)
    assert any(detail.startswith("workouts.0.default_duration:") for detail in details)


def test_load_is_logged(log_messages):
    load_class_plan(SAMPLE_CLASS)
    assert "Loaded class plan" in log_messages
