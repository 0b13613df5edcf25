"""Shared helpers for CLI command modules."""

from typing import Any

import typer
from pydantic import TypeAdapter

from alfanumrik.application.config import AppConfig, resolve_config
from alfanumrik.application.factory import build_tracker
from alfanumrik.application.tracker_service import LearningTracker


def _resolve_with_overrides(**kwargs: Any) -> AppConfig:
    """Resolve config, letting explicit CLI values win over file and env."""
    return resolve_config({k: v for k, v in kwargs.items() if v is not None})


def _tracker_from_context(ctx: typer.Context) -> LearningTracker:
    overrides = (ctx.obj or {}).get("overrides", {})
    return build_tracker(_resolve_with_overrides(**overrides))


def to_jsonable(value: Any, tp: Any = None) -> Any:
    """Dump dataclasses/enums/datetimes to plain JSON types."""
    return TypeAdapter(tp if tp is not None else type(value)).dump_python(value, mode="json")
