import argparse
import json
import sys

from formsteps.core.observability import ensure_logging
from formsteps.core.runtime.settings import load_settings
from formsteps.core.state import StepState
from formsteps.core.validation import load_form_yaml, validate_steps_yaml


def _status_marker(st: dict) -> str:
    if not st["accessible"]:
        return "locked"
    if st["bad"]:
        return "error"
    if st["good"]:
        return "done"
    if st["finished"]:
        return "visited"
    return "open"


def main(argv=None) -> int:
    argv = argv or sys.argv[1:]
    parser = argparse.ArgumentParser(prog="formsteps", description="formsteps-core CLI")
    sp = parser.add_subparsers(dest="cmd", required=True)

    valp = sp.add_parser("validate", help="Validate a steps YAML (schema + semantic)")
    valp.add_argument("--steps-yaml", required=True, help="Path to steps YAML")
    valp.add_argument("--json", action="store_true", help="Output machine-readable JSON")

    explp = sp.add_parser("explain", help="Run one step transition over the fields in a steps YAML and show step statuses")
    explp.add_argument("--steps-yaml", required=True, help="Path to steps YAML (with fields)")
    explp.add_argument("--step", default=None, help="Submitted current step")
    explp.add_argument("--next", default=None, help="Requested next step")
    explp.add_argument("--last", default=None, help="Submitted last accessible step")
    explp.add_argument("--seen", default=None, help="Submitted deepest seen step")
    explp.add_argument("--unlock", action="store_true", help="Make all steps accessible after the transition")
    explp.add_argument("--json", action="store_true", help="Output machine-readable JSON")

    args = parser.parse_args(argv)
    settings = load_settings()
    ensure_logging(settings)

    if args.cmd == "validate":
        report = validate_steps_yaml(args.steps_yaml)
        if args.json:
            print(json.dumps(report, ensure_ascii=False))
        else:
            if report.get("ok"):
                print(f"OK: {report.get('steps_yaml')}")
            else:
                print(f"INVALID: {report.get('steps_yaml')}")
                for e in report.get("errors", []):
                    print(f"- {e.get('loc')}: {e.get('code')} - {e.get('msg')}")
            for w in report.get("warnings", []) or []:
                print(f"! {w.get('loc')}: {w.get('code')} - {w.get('msg')}")
        return 0 if report.get("ok") else 2

    if args.cmd == "explain":
        state = StepState(step=args.step, next=args.next, last=args.last, seen=args.seen)
        _registry, form = load_form_yaml(args.steps_yaml, state=state, settings=settings)
        ctl = form.steps
        if args.unlock:
            ctl.unlock_steps()
        statuses = [s.as_dict() for s in ctl.step_statuses()]
        out = {
            "steps_yaml": args.steps_yaml,
            "state": ctl.to_fields(),
            "incorrect_step": ctl.incorrect_step(),
            "steps": statuses,
        }
        if args.json:
            print(json.dumps(out, ensure_ascii=False))
        else:
            print(f"step={ctl.step} last={ctl.last} seen={ctl.seen}")
            for st in statuses:
                cur = ">" if st["current"] else " "
                label = st["label"] or "(extra)"
                print(f"{cur} {st['index'] + 1}. {st['step']} {label} [{_status_marker(st)}]")
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
