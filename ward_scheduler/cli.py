"""Command-line interface for the ward scheduler."""

from __future__ import annotations

import argparse
import json
from datetime import date

from ward_scheduler.config import SchedulerConfig, load_config
from ward_scheduler.domain.db import DEFAULT_DB_URL, get_session, init_database
from ward_scheduler.engine.optimizer import optimize_schedule
from ward_scheduler.engine.orchestrator import generate_schedule
from ward_scheduler.io.export_csv import (
    export_shifts_csv,
    export_staff_csv,
    write_assignments_csv,
    write_roster_grid_csv,
)
from ward_scheduler.io.import_csv import (
    import_staff_csv,
    import_vacations_csv,
    read_absences_csv,
    read_assignments_csv,
    read_staff_csv,
)
from ward_scheduler.services.conflicts import check_conflicts
from ward_scheduler.services.scoring import analyze_quality, compute_quality, summarize_assignments


def _load_cfg(args: argparse.Namespace) -> SchedulerConfig:
    if getattr(args, "config", None):
        return load_config(args.config)
    return SchedulerConfig()


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    db_url = args.db or DEFAULT_DB_URL
    init_database(db_url)
    print(f"[OK] Database initialized: {db_url}")


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import staff and vacation CSVs into the database."""
    db_url = args.db or DEFAULT_DB_URL
    session = get_session(db_url)

    try:
        if args.staff:
            count = import_staff_csv(session, args.staff)
            print(f"[OK] Imported {count} staff")

        if args.vacations:
            count = import_vacations_csv(session, args.vacations)
            print(f"[OK] Imported {count} vacations")

        session.close()
        print("[OK] CSV import complete")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Import failed: {e}")
        raise


def _cmd_generate(args: argparse.Namespace) -> None:
    """Generate a roster for one role and date range."""
    db_url = args.db or DEFAULT_DB_URL
    session = get_session(db_url)

    try:
        cfg = _load_cfg(args)
        result = generate_schedule(
            session,
            (args.start, args.end),
            args.role,
            cfg=cfg,
            persist=not args.dry_run,
        )

        if args.out:
            if args.grid:
                write_roster_grid_csv(args.out, result.assignments)
            else:
                write_assignments_csv(args.out, result.assignments)
            print(f"[INFO] Assignments written to {args.out}")

        session.close()
        print(summarize_assignments(result.assignments))
        print(f"[OK] Generated {len(result.assignments)} assignments "
              f"(quality {result.metrics.overall_quality_score:.1f}/100)")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Generation failed: {e}")
        raise


def _cmd_score(args: argparse.Namespace) -> None:
    """Score a roster CSV against a staff CSV."""
    cfg = _load_cfg(args)
    assignments = read_assignments_csv(args.assignments)
    staff = read_staff_csv(args.staff)
    metrics = compute_quality(assignments, staff, cfg.score_weights, cfg.shift_hours)
    print(json.dumps(metrics.to_dict(), indent=2))
    for name, value in analyze_quality(assignments, staff).items():
        print(f"[INFO] {name}: {value:.2f}/10")
    print(f"[OK] Quality score: {metrics.overall_quality_score:.1f}/100")


def _cmd_check(args: argparse.Namespace) -> None:
    """Check a roster CSV for conflicts."""
    cfg = _load_cfg(args)
    assignments = read_assignments_csv(args.assignments)
    absences = read_absences_csv(args.absences) if args.absences else []
    conflicts = check_conflicts(assignments, absences, cfg.optimization if args.rules else None)

    if conflicts:
        for conflict in conflicts:
            print(f"[WARN] {conflict.kind.value}: {conflict.message}")
        raise SystemExit(f"[ERROR] {len(conflicts)} conflicts found")
    print(f"[OK] No conflicts in {len(assignments)} assignments")


def _cmd_optimize(args: argparse.Namespace) -> None:
    """Run the swap optimizer over a roster CSV."""
    cfg = _load_cfg(args)
    assignments = read_assignments_csv(args.assignments)
    staff = read_staff_csv(args.staff)

    before = compute_quality(assignments, staff, cfg.score_weights, cfg.shift_hours)
    optimized = optimize_schedule(assignments, staff, cfg.optimization)
    after = compute_quality(optimized, staff, cfg.score_weights, cfg.shift_hours)

    changed = sum(1 for old, new in zip(assignments, optimized) if old.shift_type is not new.shift_type)
    write_assignments_csv(args.out, optimized)
    print(f"[INFO] {changed} assignments changed")
    print(f"[OK] Quality {before.overall_quality_score:.1f} -> {after.overall_quality_score:.1f}; "
          f"written to {args.out}")


def _cmd_export(args: argparse.Namespace) -> None:
    """Export data from database to CSV."""
    db_url = args.db or DEFAULT_DB_URL
    session = get_session(db_url)

    try:
        if args.shifts:
            count = export_shifts_csv(session, args.shifts, args.start, args.end, grid=args.grid)
            print(f"[OK] Exported {count} rows to {args.shifts}")

        if args.staff:
            count = export_staff_csv(session, args.staff)
            print(f"[OK] Exported {count} staff to {args.staff}")

        session.close()

    except Exception as e:
        session.close()
        print(f"[ERROR] Export failed: {e}")
        raise


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="ward-scheduler",
        description="Shift roster generation for nursing staff",
    )

    # Global options
    parser.add_argument("--db", help=f"Database URL (default: {DEFAULT_DB_URL})")

    sub = parser.add_subparsers(dest="command", required=True)

    # init-db command
    init = sub.add_parser("init-db", help="Initialize database")
    init.set_defaults(func=_cmd_init_db)

    # import-csv command
    imp = sub.add_parser("import-csv", help="Import CSV data into database")
    imp.add_argument("--staff", help="Path to staff CSV")
    imp.add_argument("--vacations", help="Path to vacations CSV")
    imp.set_defaults(func=_cmd_import_csv)

    # generate command
    gen = sub.add_parser("generate", help="Generate a roster for a role and date range")
    gen.add_argument("--start", required=True, type=date.fromisoformat, help="First date (YYYY-MM-DD)")
    gen.add_argument("--end", required=True, type=date.fromisoformat, help="Last date (YYYY-MM-DD)")
    gen.add_argument("--role", default="NURSE", help="NURSE, OSS or HEAD_NURSE (default: NURSE)")
    gen.add_argument("--config", help="Path to config YAML or JSON")
    gen.add_argument("--out", help="Optional: write assignments to CSV")
    gen.add_argument("--grid", action="store_true", help="Write --out as a staff x date grid")
    gen.add_argument("--dry-run", action="store_true", help="Do not store the roster")
    gen.set_defaults(func=_cmd_generate)

    # score command
    sc = sub.add_parser("score", help="Score a roster CSV and print the 0-10 quality analysis")
    sc.add_argument("--assignments", required=True, help="Path to roster CSV")
    sc.add_argument("--staff", required=True, help="Path to staff CSV")
    sc.add_argument("--config", help="Path to config YAML or JSON")
    sc.set_defaults(func=_cmd_score)

    # check command
    chk = sub.add_parser("check", help="Check a roster CSV for conflicts")
    chk.add_argument("--assignments", required=True, help="Path to roster CSV")
    chk.add_argument("--absences", help="Path to absences CSV")
    chk.add_argument("--rules", action="store_true", help="Also check transition and consecutive-day rules")
    chk.add_argument("--config", help="Path to config YAML or JSON")
    chk.set_defaults(func=_cmd_check)

    # optimize command
    opt = sub.add_parser("optimize", help="Improve a roster CSV with shift swaps")
    opt.add_argument("--assignments", required=True, help="Path to roster CSV")
    opt.add_argument("--staff", required=True, help="Path to staff CSV")
    opt.add_argument("--out", required=True, help="Path to write the optimized roster")
    opt.add_argument("--config", help="Path to config YAML or JSON")
    opt.set_defaults(func=_cmd_optimize)

    # export command
    exp = sub.add_parser("export", help="Export data from database to CSV")
    exp.add_argument("--shifts", help="Path to export shifts CSV")
    exp.add_argument("--staff", help="Path to export staff CSV")
    exp.add_argument("--start", type=date.fromisoformat, help="First date to export (optional)")
    exp.add_argument("--end", type=date.fromisoformat, help="Last date to export (optional)")
    exp.add_argument("--grid", action="store_true", help="Write shifts as a staff x date grid")
    exp.set_defaults(func=_cmd_export)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
