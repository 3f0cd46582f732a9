"""Main entry point for cv-scorer."""

import argparse
import asyncio
import json
import sqlite3
import sys
from datetime import UTC, datetime, time
from pathlib import Path

from src import __version__
from src.config.settings import Settings
from src.utils.logging import configure_logging


def _parse_when(value: str, *, end_of_day: bool = False) -> datetime:
    """Parse an ISO date or datetime; bare dates cover the whole day."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date: {value}") from e
    if len(value) == 10 and end_of_day:
        parsed = datetime.combine(parsed.date(), time.max)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _id_list(value: str) -> list[str]:
    ids = [part.strip() for part in value.split(",") if part.strip()]
    if not ids:
        raise argparse.ArgumentTypeError("--ids must name at least one candidate")
    return ids


def _write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="cv-scorer",
        description="cv-scorer: explainable résumé-to-job scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src score --job job.yaml --resume resume.txt
  python -m src store add-job job.yaml
  python -m src batch --job-id backend --start 2024-01-01 --end 2024-01-31
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also append log records to this file (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available commands",
    )

    # Single scan
    score_parser = subparsers.add_parser(
        "score",
        help="Score one résumé file against one job profile file",
    )
    score_parser.add_argument("--job", type=Path, required=True, help="Job profile (YAML/JSON)")
    score_parser.add_argument("--resume", type=Path, required=True, help="Résumé text file")
    score_parser.add_argument("--out", type=Path, default=None, help="Write the full result as JSON")

    # Batch
    batch_parser = subparsers.add_parser(
        "batch",
        help="Score stored candidates against a stored job profile",
    )
    batch_parser.add_argument("--job-id", required=True, help="Stored job profile id")
    target = batch_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--ids", type=_id_list, help="Comma-separated candidate ids")
    target.add_argument("--start", help="Start of the creation window (ISO date)")
    batch_parser.add_argument("--end", help="End of the creation window (ISO date, inclusive)")
    batch_parser.add_argument("--db", type=Path, default=None, help="Override the store path")

    # Store maintenance
    store_parser = subparsers.add_parser("store", help="Inspect and edit the candidate store")
    store_parser.add_argument("--db", type=Path, default=None, help="Override the store path")
    store_sub = store_parser.add_subparsers(dest="store_cmd", required=True)

    add_job = store_sub.add_parser("add-job", help="Store every job profile in a file")
    add_job.add_argument("file", type=Path)

    add_candidate = store_sub.add_parser("add-candidate", help="Store a candidate résumé")
    add_candidate.add_argument("--id", required=True, dest="candidate_id")
    add_candidate.add_argument("--resume", type=Path, required=True)
    add_candidate.add_argument("--status", default="new")

    show = store_sub.add_parser("show", help="Print a stored candidate")
    show.add_argument("candidate_id")

    set_status = store_sub.add_parser("set-status", help="Record a hiring decision")
    set_status.add_argument("candidate_id")
    set_status.add_argument("status")

    recent = store_sub.add_parser("recent", help="List recently added candidates")
    recent.add_argument("--limit", type=int, default=10)
    recent.add_argument("--status", default=None)

    return parser


def _print_result(result) -> None:
    print(f"Score: {result.score:.0f}/100 ({result.recommendation})")
    for name, value in result.breakdown.as_dict().items():
        print(f"  {name}: {value}")
    if result.skills_analysis.missing:
        print(f"Missing skills: {', '.join(result.skills_analysis.missing)}")
    for line in result.explanation:
        print(f"- {line}")
    if result.improvements:
        print(result.improvements)


def _run_score(parsed: argparse.Namespace) -> int:
    from src.errors import CvScorerError
    from src.scoring.evaluator import CandidateEvaluator
    from src.scoring.profile import JobProfileService

    profile_service = JobProfileService()
    try:
        job = profile_service.load_job_profile(parsed.job)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    for warning in profile_service.validate_job_profile(job):
        print(f"Warning: {warning}", file=sys.stderr)

    try:
        resume_text = parsed.resume.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        result = asyncio.run(CandidateEvaluator().evaluate(resume_text, job))
    except CvScorerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_result(result)
    if parsed.out is not None:
        _write_json(parsed.out, result.to_dict())
        print(f"Wrote: {parsed.out}")
    return 0


def _run_batch(parsed: argparse.Namespace, settings: Settings) -> int:
    from src.batch.models import BatchRequest
    from src.batch.service import BatchService
    from src.errors import NotFoundError

    try:
        if parsed.ids is not None:
            request = BatchRequest.selection(parsed.job_id, parsed.ids)
        else:
            if parsed.end is None:
                print("Error: --end is required with --start", file=sys.stderr)
                return 1
            request = BatchRequest.date_range(
                parsed.job_id,
                _parse_when(parsed.start),
                _parse_when(parsed.end, end_of_day=True),
            )
    except (ValueError, argparse.ArgumentTypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    def _progress(event) -> None:
        print(
            f"[{event.processed_count}/{event.total}] {event.state.value}: "
            f"{event.candidate_id} {event.message}"
        )

    if parsed.db is not None:
        settings.db_path = parsed.db

    service = BatchService(settings=settings, progress_callback=_progress)
    try:
        result = asyncio.run(service.run(request))
    except NotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("\nBatch complete." if not result.cancelled else "\nBatch cancelled.")
    print(
        "Totals: "
        f"total={result.total} scored={result.success_count} "
        f"skipped={result.skipped_count} failed={result.fail_count}"
    )
    failures = [o for o in result.outcomes if o.state.value == "error"]
    if failures:
        print("\nFailures:")
        for outcome in failures:
            print(f"- {outcome.candidate_id}: {outcome.message}")
    if result.fail_count:
        return 1
    return 0


async def _run_store_command(parsed: argparse.Namespace, db_path: Path) -> int:
    from src.scoring.profile import JobProfileService
    from src.store.models import CandidateRecord
    from src.store.repository import CandidateRepository

    repo = CandidateRepository(db_path)
    await repo.initialize()
    try:
        if parsed.store_cmd == "add-job":
            service = JobProfileService()
            for job in service.load_job_profiles(parsed.file):
                for warning in service.validate_job_profile(job):
                    print(f"Warning: {job.title}: {warning}", file=sys.stderr)
                profile_id = await repo.insert_job_profile(job)
                print(profile_id)
            return 0

        if parsed.store_cmd == "add-candidate":
            resume_text = parsed.resume.read_text(encoding="utf-8")
            record = await repo.insert_candidate(
                CandidateRecord(
                    id=parsed.candidate_id,
                    status=parsed.status,
                    resume_text=resume_text,
                )
            )
            print(record.id)
            return 0

        if parsed.store_cmd == "show":
            record = await repo.get_candidate(parsed.candidate_id)
            if record is None:
                print("Not found")
                return 1
            print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
            return 0

        if parsed.store_cmd == "set-status":
            await repo.update_candidate(parsed.candidate_id, {"status": parsed.status})
            print("ok")
            return 0

        if parsed.store_cmd == "recent":
            records = await repo.list_recent(limit=parsed.limit, status_filter=parsed.status)
            for rec in records:
                score = rec.data.get("score")
                score_text = f"{score:.0f}" if isinstance(score, int | float) else "-"
                created = rec.created_at.isoformat() if rec.created_at else ""
                print(f"{created} {rec.status} {score_text} {rec.id}")
            return 0

        print("Unknown store command", file=sys.stderr)
        return 1
    finally:
        await repo.close()


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Load settings
    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Configure logging
    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level, log_file=parsed.log_file or settings.log_file)

    # If no mode specified, show help
    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.info("cv-scorer v%s starting in %s mode", __version__, parsed.mode)

    from src.knowledge.tables import get_knowledge_base

    get_knowledge_base(settings.knowledge_base_path)

    if parsed.mode == "score":
        return _run_score(parsed)

    if parsed.mode == "batch":
        return _run_batch(parsed, settings)

    if parsed.mode == "store":
        from src.errors import NotFoundError

        db_path = parsed.db or settings.db_path
        try:
            return asyncio.run(_run_store_command(parsed, db_path))
        except (NotFoundError, OSError, ValueError, sqlite3.Error) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
