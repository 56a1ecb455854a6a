"""Class file loading.

Reads a class definition from YAML or JSON and validates it against
ClassPlan. All failures surface as ClassFileError.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from playmode.classes.schemas import ClassPlan
from playmode.session.errors import PlayModeError

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


class ClassFileError(PlayModeError):
    """Raised when a class file is missing, unreadable, or malformed."""

    code = "INVALID_CLASS_FILE"


def _format_validation_errors(error: ValidationError) -> list[str]:
    return [f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}" for err in error.errors()]


def load_class_plan(path: str | Path) -> ClassPlan:
    """Load a class plan from a YAML or JSON file.

    Args:
        path: Path to a .yaml, .yml, or .json file

    Returns:
        Validated ClassPlan

    Raises:
        ClassFileError: If the file is missing, has an unsupported extension,
            cannot be parsed, or does not match the ClassPlan schema
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix not in YAML_SUFFIXES | JSON_SUFFIXES:
        raise ClassFileError(
            f"Unsupported class file type: {path.name}",
            details=[f"expected one of {sorted(YAML_SUFFIXES | JSON_SUFFIXES)}"],
        )

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ClassFileError(f"Cannot read class file: {path}", details=[str(e)]) from e

    try:
        data = yaml.safe_load(text) if suffix in YAML_SUFFIXES else json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        logger.warning(f"Class file could not be parsed: {path}")
        raise ClassFileError(f"Cannot parse class file: {path.name}", details=[str(e)]) from e

    if not isinstance(data, dict):
        raise ClassFileError(f"Class file must contain a mapping: {path.name}")

    try:
        plan = ClassPlan.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Class file failed validation: {path}")
        raise ClassFileError(f"Invalid class file: {path.name}", details=_format_validation_errors(e)) from e

    logger.info("Loaded class plan", file=path.name, workouts=len(plan.workouts))
    return plan
