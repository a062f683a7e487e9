from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

import yaml

from ue5qgen.analysis.coverage import quota_frame
from ue5qgen.config import AppConfig, default_app_config
from ue5qgen.constants import FILTER_MODES, SORT_KEYS
from ue5qgen.data.loader import load_questions, save_questions
from ue5qgen.qa.dedupe import unique_filtered_questions
from ue5qgen.qa.filters import context_filtered_questions, filtered_questions, sort_questions, status_counts
from ue5qgen.quota import validate_generation
from ue5qgen.utils.logging import setup_logging
from ue5qgen.utils.validation import SchemaValidationError, validate_question_export

EXIT_QUOTA_REFUSED = 3
EXIT_SCHEMA = 4


def _load_config(path: str | None) -> AppConfig:
    if not path:
        return default_app_config()
    return AppConfig.from_file(path)


def _add_context_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--input", "-i", required=True, help="Question export (.json or .jsonl)")
    p.add_argument("--historical", help="Historical question export to include with --history")
    p.add_argument("--history", action="store_true", help="Include historical questions")
    p.add_argument("--search", default="", help="Case-insensitive search text")
    p.add_argument("--discipline", help="Discipline to keep (default: all)")
    p.add_argument("--difficulty", help="Difficulty setting, e.g. 'Easy MC' or 'Balanced All'")
    p.add_argument("--type", dest="question_type", help="Question type, e.g. 'Multiple Choice'")
    p.add_argument("--tags", nargs="+", default=[], help="Keep questions carrying any of these tags")
    p.add_argument("--creator", help="Keep only questions by this creator")


def _context(args: argparse.Namespace) -> list:
    questions = load_questions(args.input)
    historical = load_questions(args.historical) if args.historical else []
    return context_filtered_questions(
        questions,
        historical,
        include_history=args.history,
        filter_by_creator=bool(args.creator),
        search_term=args.search,
        creator_name=args.creator or "",
        discipline=args.discipline,
        difficulty=args.difficulty,
        tags=args.tags,
        question_type=args.question_type,
    )


def _cmd_quota(args: argparse.Namespace, cfg: AppConfig, logger) -> int:
    questions = load_questions(args.input)
    gen = cfg.generation
    check = validate_generation(
        args.discipline or gen.discipline,
        args.difficulty or gen.difficulty,
        args.batch_size if args.batch_size is not None else gen.batch_size,
        questions,
        question_type=args.question_type or gen.type,
        target_total=cfg.quota.target_total,
        target_per_category=cfg.quota.target_per_category,
    )
    print(json.dumps(asdict(check), indent=2))
    if not check.allowed:
        logger.warning("Quota refused: %s", check.reason)
        return EXIT_QUOTA_REFUSED
    return 0


def _cmd_filter(args: argparse.Namespace, cfg: AppConfig, logger) -> int:
    context = _context(args)
    filtered = filtered_questions(context, args.status)
    unique = sort_questions(unique_filtered_questions(filtered, args.language or cfg.generation.language), args.sort)
    logger.info("%d questions in context, %d shown after dedupe", len(context), len(unique))
    if args.output:
        save_questions(args.output, unique)
    else:
        for q in unique:
            print(f"{q.group_key} | {q.language} | {q.effective_status} | {q.question[:70]}")
    return 0


def _cmd_counts(args: argparse.Namespace, cfg: AppConfig, logger) -> int:
    print(json.dumps(status_counts(_context(args)), indent=2))
    return 0


def _cmd_coverage(args: argparse.Namespace, cfg: AppConfig, logger) -> int:
    df = quota_frame(
        load_questions(args.input),
        target_total=cfg.quota.target_total,
        target_per_category=cfg.quota.target_per_category,
    )
    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.output, index=False)
        logger.info("Wrote coverage table to %s", args.output)
    else:
        print(df.to_string(index=False))
    return 0


def _cmd_validate(args: argparse.Namespace, cfg: AppConfig, logger) -> int:
    validate_question_export(args.input)
    print(f"[validate] OK: {args.input}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ue5qgen",
        description="UE5 question review pipeline: quotas, filters and language dedupe",
        epilog="""Examples:
  # Check whether a batch of 10 'Easy MC' questions may be generated
  python -m ue5qgen.cli.main quota -i exports/questions.json --difficulty "Easy MC" --batch-size 10

  # Show pending questions in French, one per logical question
  python -m ue5qgen.cli.main filter -i exports/questions.json --status pending --language French

  # Tab counts for a search
  python -m ue5qgen.cli.main counts -i exports/questions.json --search nanite
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", "-c", default=None, help="Config file (.json or .yaml); defaults built in")
    parser.add_argument("--log-json", action="store_true", help="Emit JSON log records")
    sub = parser.add_subparsers(dest="command", help="Available commands")

    quota = sub.add_parser("quota", help="Check generation quota for a batch")
    quota.add_argument("--input", "-i", required=True, help="Question export (.json or .jsonl)")
    quota.add_argument("--discipline", help="Discipline (default from config)")
    quota.add_argument("--difficulty", help="Difficulty (default from config)")
    quota.add_argument("--type", dest="question_type", help="Question type (default from config)")
    quota.add_argument("--batch-size", type=int, default=None, help="Requested batch size")
    quota.set_defaults(func=_cmd_quota)

    flt = sub.add_parser("filter", help="List questions visible under the given filters")
    _add_context_args(flt)
    flt.add_argument("--status", choices=FILTER_MODES, default="pending", help="Status tab (default: pending)")
    flt.add_argument("--language", help="Display language for dedupe (default from config)")
    flt.add_argument("--sort", choices=SORT_KEYS, default="default", help="Sort order")
    flt.add_argument("--output", "-o", help="Write the result as a JSON export")
    flt.set_defaults(func=_cmd_filter)

    counts = sub.add_parser("counts", help="Status tab counts for the given filters")
    _add_context_args(counts)
    counts.set_defaults(func=_cmd_counts)

    coverage = sub.add_parser("coverage", help="Quota progress per category")
    coverage.add_argument("--input", "-i", required=True, help="Question export (.json or .jsonl)")
    coverage.add_argument("--output", "-o", help="Write CSV instead of printing")
    coverage.set_defaults(func=_cmd_coverage)

    validate = sub.add_parser("validate", help="Validate a question export file")
    validate.add_argument("input", help="Question export (.json or .jsonl)")
    validate.set_defaults(func=_cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    try:
        cfg = _load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Config file '{args.config}' not found")
        return 1
    except (json.JSONDecodeError, yaml.YAMLError, TypeError) as e:
        print(f"Error: Invalid config '{args.config}': {e}")
        return 1
    logger = setup_logging(cfg.logging, structured=args.log_json, app_mode=args.command)

    try:
        return args.func(args, cfg, logger)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        logger.error("FileNotFoundError: %s", e)
        return 1
    except SchemaValidationError as e:
        print("Schema validation failed.")
        print(str(e))
        return EXIT_SCHEMA
    except ValueError as e:
        print(f"Error: {e}")
        logger.error("ValueError: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
