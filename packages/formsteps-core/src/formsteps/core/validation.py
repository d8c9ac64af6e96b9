from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Tuple

import yaml
from pydantic import ValidationError

from formsteps.core.exception import ConfigurationError
from formsteps.core.forms.static import StaticForm
from formsteps.core.registry.steps import StepRegistry
from formsteps.core.runtime.settings import Settings
from formsteps.core.spec import StepsFileSpec
from formsteps.core.state import StepState

log = logging.getLogger('formsteps.core.validation')


@dataclass(frozen=True)
class StepsValidationIssue:
    code: str
    loc: str
    msg: str

    def as_dict(self) -> dict:
        return {"code": self.code, "loc": self.loc, "msg": self.msg}


def _fmt_loc(loc: Any) -> str:
    """Format a pydantic 'loc' tuple/list into a readable YAML-ish path."""
    if not loc:
        return "<root>"
    parts: List[str] = []
    for x in loc:
        if isinstance(x, int):
            # list index
            if not parts:
                parts.append(f"[{x}]")
            else:
                parts[-1] = f"{parts[-1]}[{x}]"
        else:
            parts.append(str(x))
    return ".".join(parts)


def _collect_pydantic_issues(err: ValidationError) -> List[StepsValidationIssue]:
    out: List[StepsValidationIssue] = []
    for e in err.errors():
        loc = _fmt_loc(e.get("loc"))
        msg = e.get("msg") or "Invalid value"
        etype = e.get("type") or "schema_error"
        out.append(StepsValidationIssue(code=f"schema:{etype}", loc=loc, msg=msg))
    return out


def _read_yaml(path: str | Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def validate_steps_dict(raw: Any, *, steps_path: str | None = None) -> dict:
    """Validate a step definition (schema + semantic checks).

    Returns a report dict: {ok: bool, errors: [{code, loc, msg}...], warnings: [...]}
    """
    issues: List[StepsValidationIssue] = []
    warnings: List[StepsValidationIssue] = []

    try:
        spec = StepsFileSpec.model_validate(raw)
    except ValidationError as e:
        issues.extend(_collect_pydantic_issues(e))
        return {"ok": False, "errors": [x.as_dict() for x in issues], "warnings": [], "steps_yaml": steps_path}

    # ---- Semantic validation ----

    if not spec.steps:
        issues.append(StepsValidationIssue(code="semantic:no_steps", loc="steps", msg="At least one step must be defined"))

    step_ids = [s.id for s in spec.steps]
    dup_steps = sorted({sid for sid in step_ids if step_ids.count(sid) > 1})
    for sid in dup_steps:
        issues.append(StepsValidationIssue(code="semantic:duplicate_step_id", loc="steps", msg=f"Duplicate step id: {sid}"))

    for s_idx, s in enumerate(spec.steps):
        if s.label is None:
            warnings.append(
                StepsValidationIssue(
                    code="semantic:unlabelled_step",
                    loc=f"steps[{s_idx}]",
                    msg=f"Step {s.id!r} has no label and is left out of step names",
                )
            )

    field_names = [f.name for f in spec.fields]
    dup_fields = sorted({n for n in field_names if field_names.count(n) > 1})
    for n in dup_fields:
        issues.append(StepsValidationIssue(code="semantic:duplicate_field_name", loc="fields", msg=f"Duplicate field name: {n}"))

    declared = set(step_ids)
    for f_idx, f in enumerate(spec.fields):
        if f.step is not None and f.step not in declared:
            issues.append(
                StepsValidationIssue(
                    code="semantic:unknown_step",
                    loc=f"fields[{f_idx}].step",
                    msg=f"Field {f.name!r} is tagged with undeclared step {f.step!r}; declared: {step_ids}",
                )
            )

    return {
        "ok": not issues,
        "errors": [x.as_dict() for x in issues],
        "warnings": [x.as_dict() for x in warnings],
        "steps_yaml": steps_path,
    }


def validate_steps_yaml(steps_yaml: str | Path) -> dict:
    """Validate a steps YAML file. See validate_steps_dict for the report shape."""
    try:
        raw = _read_yaml(steps_yaml)
    except yaml.YAMLError as e:
        issue = StepsValidationIssue(code="schema:yaml_error", loc="<root>", msg=str(e))
        return {"ok": False, "errors": [issue.as_dict()], "warnings": [], "steps_yaml": str(steps_yaml)}
    report = validate_steps_dict(raw, steps_path=str(steps_yaml))
    if not report["ok"]:
        log.debug("steps yaml %s has %d error(s)", steps_yaml, len(report["errors"]))
    return report


def _load_spec(steps_yaml: str | Path) -> StepsFileSpec:
    try:
        raw = _read_yaml(steps_yaml)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid steps file {steps_yaml}: {e}") from e
    try:
        return StepsFileSpec.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid steps file {steps_yaml}: {e}") from e


def load_steps_yaml(steps_yaml: str | Path) -> StepRegistry:
    """Build a StepRegistry from a steps YAML file."""
    return StepRegistry(_load_spec(steps_yaml).step_pairs())


def load_form_yaml(
    steps_yaml: str | Path,
    *,
    state: StepState | None = None,
    settings: Settings | None = None,
) -> Tuple[StepRegistry, StaticForm]:
    """Build a registry plus a reference host form (with its transition already run)."""
    report = validate_steps_yaml(steps_yaml)
    if not report["ok"]:
        msgs = "; ".join(f"{e['loc']}: {e['msg']}" for e in report["errors"])
        raise ConfigurationError(f"Invalid steps file {steps_yaml}: {msgs}")
    spec = _load_spec(steps_yaml)
    registry = StepRegistry(spec.step_pairs())
    form = StaticForm.from_specs(spec.fields, registry=registry, state=state, settings=settings)
    return registry, form
