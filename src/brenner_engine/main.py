"""
Command-line entry point for the brenner-engine.

Inspects exported audit ledgers, re-derives falsification cascades and
lints hypothesis sets from JSON files.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from brenner_engine.analysis import lint_hypothesis_set
from brenner_engine.config import get_settings
from brenner_engine.lifecycle import (
    AssumptionTransitionHistoryStore,
    HistoryImportError,
    compute_falsification_propagation,
)
from brenner_engine.schemas import Assumption, AssumptionStatus, Hypothesis

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_LINT_FINDINGS = 2


class InvalidInputError(ValueError):
    """Raised when an input file parses as JSON but has the wrong top-level shape."""


def setup_logging() -> None:
    """Configure application logging."""
    settings = get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brenner-engine",
        description="Inspect assumption lifecycles, falsification cascades and hypothesis sets.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    history = commands.add_parser("history", help="Validate an exported ledger and print its timeline")
    history.add_argument("file", type=Path, help="JSON export of the transition history")
    scope = history.add_mutually_exclusive_group()
    scope.add_argument("--assumption", help="Only show transitions for this assumption id")
    scope.add_argument("--evidence", help="Only show transitions citing this evidence reference")

    propagate = commands.add_parser("propagate", help="Compute the falsification cascade for an assumption")
    propagate.add_argument("file", type=Path, help="JSON document describing one assumption")

    lint = commands.add_parser("lint", help="Lint a hypothesis set")
    lint.add_argument("file", type=Path, help="JSON list of hypotheses")
    lint.add_argument(
        "--strict",
        action="store_true",
        help=f"Exit with status {EXIT_LINT_FINDINGS} when anything is flagged",
    )

    return parser


def _load_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=get_settings().json_indent, ensure_ascii=False))


def _run_history(args: argparse.Namespace) -> int:
    data = _load_json(args.file)
    if not isinstance(data, dict):
        raise InvalidInputError(f"Expected a JSON object keyed by assumption id, got {type(data).__name__}")

    store = AssumptionTransitionHistoryStore()
    store.import_history(data)

    if args.assumption:
        transitions = store.get_history(args.assumption)
    elif args.evidence:
        transitions = store.get_transitions_by_evidence(args.evidence)
    else:
        transitions = store.get_all_transitions()

    _emit(
        {
            "transitions": [t.to_wire() for t in transitions],
            "falsified": store.get_falsified_assumptions(),
        }
    )
    return EXIT_OK


def _run_propagate(args: argparse.Namespace) -> int:
    data = _load_json(args.file)
    if not isinstance(data, dict):
        raise InvalidInputError(f"Expected a JSON object describing one assumption, got {type(data).__name__}")

    assumption = Assumption.model_validate(data)
    if assumption.status != AssumptionStatus.FALSIFIED:
        logger.info(f"Assumption {assumption.id} is {assumption.status.value}; showing the hypothetical cascade")
    _emit(compute_falsification_propagation(assumption).to_wire())
    return EXIT_OK


def _run_lint(args: argparse.Namespace) -> int:
    data = _load_json(args.file)
    if not isinstance(data, list):
        raise InvalidInputError(f"Expected a JSON list of hypotheses, got {type(data).__name__}")

    report = lint_hypothesis_set([Hypothesis.model_validate(item) for item in data])
    payload = report.model_dump(mode="json")
    payload["clean"] = report.clean
    _emit(payload)

    if args.strict and not report.clean:
        return EXIT_LINT_FINDINGS
    return EXIT_OK


_COMMANDS = {
    "history": _run_history,
    "propagate": _run_propagate,
    "lint": _run_lint,
}


def run(argv: list[str] | None = None) -> int:
    """
    Parse arguments and run one command.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)
    try:
        return _COMMANDS[args.command](args)
    except HistoryImportError as e:
        logger.error(f"Corrupted history in {args.file}: {e}")
    except ValidationError as e:
        logger.error(f"Invalid record in {args.file}: {e}")
    except json.JSONDecodeError as e:
        logger.error(f"{args.file} is not valid JSON: {e}")
    except InvalidInputError as e:
        logger.error(f"Unexpected content in {args.file}: {e}")
    except OSError as e:
        logger.error(f"Cannot read {args.file}: {e}")
    return EXIT_INVALID_INPUT


def main() -> None:
    """Main entry point for the application."""
    setup_logging()

    try:
        sys.exit(run(sys.argv[1:]))
    except KeyboardInterrupt:
        sys.exit(EXIT_OK)
    except Exception as e:
        logging.error(f"Application error: {e}", exc_info=True)
        sys.exit(EXIT_INVALID_INPUT)


if __name__ == "__main__":
    main()
