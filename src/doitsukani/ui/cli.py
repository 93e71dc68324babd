from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from doitsukani.app import deepl_usage, list_radicals, recent_runs, sync_radical_synonyms
from doitsukani.config import ConfigurationError, configure_logging, get_sync_config
from doitsukani.domain.model import RunState, SynonymPolicy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from doitsukani.domain.batching import BatchProgress

log = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 60


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Add German translations of WaniKani radicals as meaning synonyms"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Synchronise radical meaning synonyms")
    sync.add_argument(
        "--policy",
        type=SynonymPolicy,
        choices=list(SynonymPolicy),
        default=SynonymPolicy.SMART_MERGE,
        help="How translations are merged into existing synonyms (default: %(default)s)",
    )
    _add_level_argument(sync)
    sync.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Number of radicals per batch (defaults to config)",
    )
    sync.add_argument(
        "--item-delay",
        type=float,
        default=None,
        help="Seconds to wait between two radicals (defaults to config)",
    )
    sync.add_argument(
        "--batch-delay",
        type=float,
        default=None,
        help="Additional seconds to wait between two batches (defaults to config)",
    )
    sync.add_argument(
        "--target-lang",
        type=str,
        default=None,
        help="DeepL target language code (default: DE)",
    )
    sync.add_argument(
        "--no-record",
        action="store_true",
        help="Do not write the run to the local history database",
    )

    radicals = subparsers.add_parser("radicals", help="List radicals and their synonyms")
    _add_level_argument(radicals)

    history = subparsers.add_parser("history", help="Show recently recorded runs")
    history.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of runs to show (default: %(default)s)",
    )

    subparsers.add_parser("deepl-usage", help="Show DeepL character usage")

    return parser.parse_args(list(argv))


def _add_level_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--level",
        dest="levels",
        type=int,
        action="append",
        help="WaniKani level to include; repeat for several levels (default: all)",
    )


def _validate_levels(levels: Sequence[int] | None) -> list[int] | None:
    if levels is None:
        return None
    invalid = [level for level in levels if not MIN_LEVEL <= level <= MAX_LEVEL]
    if invalid:
        raise ValueError(f"Levels must be between {MIN_LEVEL} and {MAX_LEVEL}: {invalid}")
    return sorted(set(levels))


def _log_progress(session_id: int, progress: BatchProgress) -> None:
    log.info(
        "Session %d: %d/%d (%d%%), batch %d/%d",
        session_id,
        progress.completed,
        progress.total,
        progress.percent,
        progress.batch_index + 1,
        progress.batch_count,
    )


def _run_sync(args: argparse.Namespace, levels: list[int] | None) -> None:
    config = get_sync_config(
        batch_size=args.batch_size,
        item_delay_seconds=args.item_delay,
        batch_delay_seconds=args.batch_delay,
        target_language=args.target_lang,
    )
    result = sync_radical_synonyms(
        policy=args.policy,
        levels=levels,
        sync_config=config,
        record=not args.no_record,
        on_progress=_log_progress,
    )
    for failure in result.failures:
        log.warning("Subject %d failed (%s): %s", failure.item_id, failure.kind, failure.reason)
    log.info(
        "Sync %s: %d of %d radicals processed, %d successful, %d failed",
        result.state.value,
        result.attempted,
        result.total_items,
        result.stats.successful,
        result.stats.failed,
    )
    if result.state is RunState.CANCELLED:
        log.info("Closed by user (Ctrl+C)")


def _show_radicals(levels: list[int] | None) -> None:
    for item in list_radicals(levels=levels):
        synonyms = ", ".join(item.current_synonyms) or "-"
        log.info(
            "[%2d] %s %s: %s",
            item.level,
            item.characters or "?",
            item.label,
            synonyms,
        )


def _show_history(limit: int) -> None:
    runs = recent_runs(limit=limit)
    if not runs:
        log.info("No runs recorded yet")
        return
    for run in runs:
        log.info(
            "%s %-11s %-9s created=%d updated=%d skipped=%d failed=%d of %d",
            run.started_at.isoformat(timespec="seconds"),
            run.policy.value,
            run.state.value,
            run.created,
            run.updated,
            run.skipped,
            run.failed,
            run.total_items,
        )


def _show_deepl_usage() -> None:
    usage = deepl_usage()
    log.info(
        "DeepL usage: %d of %d characters (%.1f%%), %d remaining",
        usage.character_count,
        usage.character_limit,
        usage.percent_used,
        usage.remaining,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(
            level=logging.DEBUG if parsed_args.verbose else logging.INFO, force=True
        )
        levels = _validate_levels(getattr(parsed_args, "levels", None))
        if parsed_args.command == "history" and parsed_args.limit < 1:
            raise ValueError("--limit must be at least 1")
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "sync":
            _run_sync(parsed_args, levels)
        elif parsed_args.command == "radicals":
            _show_radicals(levels)
        elif parsed_args.command == "history":
            _show_history(parsed_args.limit)
        elif parsed_args.command == "deepl-usage":
            _show_deepl_usage()
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


if __name__ == "__main__":
    main()
