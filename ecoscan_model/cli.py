"""
Command-line interface for workload assessments.

Usage:
    python -m ecoscan_model workload.json
    python -m ecoscan_model workload.json --apply training_region --apply quantization
    python -m ecoscan_model --import extracted.json --apply-all --report report.json
    python -m ecoscan_model workload.json --history history.json --save --name "Chatbot v2"
    python -m ecoscan_model --history history.json --list-history
    python -m ecoscan_model --history history.json --clear-history
    python -m ecoscan_model workload.json --sweep project_lifetime_years 1 5 5
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_CONFIG, find_config_issues, read_json, sanitize_config
from .formatter import (
    badge, colorize, heading, kv_block, note_block, signed_pct,
    supports_color, table, title,
)
from .importer import import_config
from .model import lifetime_inference_co2_kg
from .reference import hardware_names, region_names
from .report import (
    HistoryRecord, HistoryStore, build_history_record, build_report,
    carbon_offset_percent, generate_report_filename, save_report, savings_euro,
)
from .session import AssessmentSession
from .strategies import StrategyStatus, project_all, strategy_ids
from .sweep import (
    SWEEPABLE_PARAMETERS, SweepResult, find_breakeven_value, linear_values, sweep_parameter,
)

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    StrategyStatus.APPLIED: "Applied",
    StrategyStatus.AVAILABLE: "Available",
    StrategyStatus.BASELINE_OPTIMAL: "Baseline optimal",
}


def _fmt_value(value) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def format_assessment_summary(session: AssessmentSession) -> str:
    """Format a human-readable summary of an assessment."""
    pair = session.get_metrics()
    base, cur = pair.baseline, pair.current
    cfg = session.current
    lines = []

    lines.append(title("Lifecycle Assessment"))
    lines.append("")
    lines.append(heading("Current configuration"))
    lines.append(kv_block([
        ("Hardware", f"{cfg.gpu_count} x {cfg.hardware_model}"),
        ("Training", f"{cfg.training_hours:g} h in {cfg.training_region}"),
        ("Inference", f"{cfg.monthly_requests:g} req/month, "
                      f"{cfg.avg_latency_seconds:g} s in {cfg.inference_region}"),
        ("Lifetime", f"{cfg.project_lifetime_years:g} years"),
    ]))
    lines.append("")

    lines.append(heading("Footprint"))
    rows = [
        ("Training CO2 (kg)", f"{base.training_co2_kg:.2f}", f"{cur.training_co2_kg:.2f}"),
        ("Inference CO2 (kg/yr)", f"{base.inference_co2_kg:.2f}", f"{cur.inference_co2_kg:.2f}"),
        ("Inference CO2 (kg, lifetime)",
         f"{lifetime_inference_co2_kg(base, session.baseline):.2f}",
         f"{lifetime_inference_co2_kg(cur, cfg):.2f}"),
        ("Embodied CO2 (kg)", f"{base.embodied_co2_kg:.2f}", f"{cur.embodied_co2_kg:.2f}"),
        ("Total CO2 (kg)", f"{base.total_co2_kg:.2f}", f"{cur.total_co2_kg:.2f}"),
        ("Energy cost (EUR)", f"{base.total_cost_euro:.2f}", f"{cur.total_cost_euro:.2f}"),
        ("Grade", base.grade, cur.grade),
    ]
    lines.append(table(["Metric", "Baseline", "Current"], rows, aligns=['l', 'r', 'r']))
    lines.append("")

    lines.append(heading("Strategies"))
    projections = project_all(session.current, session.baseline)
    rows = []
    for state in session.strategy_states():
        projection = projections[state.strategy_id]
        delta = f"{projection.co2_delta_kg:+.2f}" if projection.action else "-"
        rows.append((
            state.strategy_id,
            STATUS_LABELS[state.status],
            _fmt_value(state.current_value),
            _fmt_value(state.target_value),
            delta,
        ))
    lines.append(table(
        ["Strategy", "Status", "Current", "Target", "Toggle dCO2 (kg)"],
        rows, aligns=['l', 'l', 'r', 'r', 'r'],
    ))
    lines.append("")

    lines.append(badge("Carbon offset", signed_pct(carbon_offset_percent(base, cur))))
    lines.append(badge("Savings", f"{savings_euro(base, cur):.2f} EUR"))

    if cfg.audit_notes:
        lines.append("")
        lines.append(heading("Audit notes"))
        lines.append(note_block(cfg.audit_notes))
    if cfg.recommendations:
        lines.append("")
        lines.append(heading("Recommendations"))
        lines.append(note_block(cfg.recommendations))

    return "\n".join(lines)


def format_history(records: List[HistoryRecord]) -> str:
    """Format saved assessments, newest first."""
    if not records:
        return "No saved assessments."
    rows = [
        (r.id, r.name, r.created_date,
         f"{r.baseline_metrics.grade} -> {r.current_metrics.grade}",
         f"{r.co2_avoided_kg:.1f}", f"{r.savings_euro:.2f}")
        for r in records
    ]
    return table(
        ["Id", "Name", "Date", "Grade", "CO2 avoided (kg)", "Savings (EUR)"],
        rows, aligns=['l', 'l', 'l', 'l', 'r', 'r'],
    )


def format_sweep_summary(result: SweepResult) -> str:
    """Format a sweep as a table of baseline vs current totals."""
    rows = [
        (f"{value:g}", f"{b:.1f}", f"{c:.1f}", f"{bg} -> {cg}", signed_pct(off))
        for value, b, c, bg, cg, off in zip(
            result.param_values, result.baseline_co2_kg, result.current_co2_kg,
            result.baseline_grade, result.current_grade, result.carbon_offset_pct,
        )
    ]
    return "\n".join([
        f"Sweep parameter: {result.param_name}",
        table(["Value", "Baseline CO2", "Current CO2", "Grade", "Offset"],
              rows, aligns=['r', 'r', 'r', 'l', 'r']),
    ])


def assessment_to_dict(session: AssessmentSession) -> dict:
    """JSON view of an assessment for --json output."""
    pair = session.get_metrics()
    return {
        "baseline": session.baseline.to_dict(),
        "current": session.current.to_dict(),
        "baselineMetrics": pair.baseline.to_dict(),
        "currentMetrics": pair.current.to_dict(),
        "strategies": [
            {
                "id": s.strategy_id,
                "status": s.status.value,
                "current": s.current_value,
                "target": s.target_value,
            }
            for s in session.strategy_states()
        ],
        "carbonOffsetPercent": carbon_offset_percent(pair.baseline, pair.current),
        "savings": savings_euro(pair.baseline, pair.current),
    }


def _start_session(args) -> Optional[AssessmentSession]:
    """Build the session from --import, a config path, or the defaults."""
    if args.import_path is not None:
        return AssessmentSession.start(import_config(args.import_path))

    if args.config is None:
        return AssessmentSession.start(DEFAULT_CONFIG)

    try:
        raw = read_json(args.config)
    except FileNotFoundError:
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return None
    except ValueError as e:
        print(f"Error: Invalid JSON in {args.config}: {e}", file=sys.stderr)
        return None

    for issue in find_config_issues(raw):
        logger.info("%s: %s", args.config, issue)
    return AssessmentSession.start(sanitize_config(raw))


def _print(text: str, use_color: bool) -> None:
    print(colorize(text) if use_color else text)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="ecoscan",
        description="Estimate and optimize the lifecycle footprint of an AI workload",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(f"Strategies: {', '.join(strategy_ids())}\n"
                f"Hardware: {', '.join(hardware_names())}\n"
                f"Regions: {', '.join(region_names())}"),
    )
    parser.add_argument("config", nargs="?", type=Path, default=None,
                        help="Workload config JSON (default: built-in new-project profile)")
    parser.add_argument("--import", dest="import_path", type=Path, default=None,
                        help="Candidate config from a document extractor (falls back on failure)")
    parser.add_argument("--apply", action="append", default=[], metavar="STRATEGY",
                        help="Toggle a strategy (repeatable)")
    parser.add_argument("--apply-all", action="store_true",
                        help="Apply every available strategy")
    parser.add_argument("--report", type=Path, nargs="?", const=Path("."), default=None,
                        help="Write a JSON report (file path or directory)")
    parser.add_argument("--requested-by", default="",
                        help="Name recorded in the report")
    parser.add_argument("--history", type=Path, default=None,
                        help="History file (JSON)")
    parser.add_argument("--save", action="store_true",
                        help="Save the assessment to --history")
    parser.add_argument("--name", default=None,
                        help="Name for the saved assessment")
    parser.add_argument("--list-history", action="store_true",
                        help="List saved assessments and exit")
    parser.add_argument("--rename", nargs=2, metavar=("ID", "NAME"), default=None,
                        help="Rename a saved assessment and exit")
    parser.add_argument("--clear-history", action="store_true",
                        help="Delete every saved assessment and exit")
    parser.add_argument("--sweep", nargs=4, metavar=("PARAM", "START", "STOP", "NUM"),
                        default=None, help=f"Sweep one of: {', '.join(SWEEPABLE_PARAMETERS)}")
    parser.add_argument("--json", action="store_true",
                        help="Print the assessment as JSON")
    parser.add_argument("--no-color", action="store_true",
                        help="Disable ANSI colors")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log config substitutions")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    use_color = supports_color() and not args.no_color

    if (args.save or args.list_history or args.rename or args.clear_history) \
            and args.history is None:
        parser.error("--save, --list-history, --rename and --clear-history require --history")
    if args.import_path is not None and args.config is not None:
        parser.error("Cannot use --import with a config file")

    # History-only operations
    if args.list_history or args.rename or args.clear_history:
        store = HistoryStore(args.history)
        try:
            if args.clear_history:
                store.clear()
            if args.rename:
                record_id, name = args.rename
                store.rename(record_id, name)
            records = store.records()
        except KeyError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            return 1
        except (ValueError, OSError) as e:
            print(f"Error: Cannot use history file {args.history}: {e}", file=sys.stderr)
            return 1
        _print(format_history(records), use_color)
        return 0

    session = _start_session(args)
    if session is None:
        return 1

    for strategy_id in args.apply:
        try:
            session.toggle(strategy_id)
        except KeyError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            return 1
    if args.apply_all:
        session.apply_all()

    if args.json:
        print(json.dumps(assessment_to_dict(session), indent=2))
    else:
        _print(format_assessment_summary(session), use_color)

    pair = session.get_metrics()

    if args.report is not None:
        report = build_report(session.current, pair.current, args.requested_by)
        path = args.report
        if path.is_dir():
            path = path / generate_report_filename(report["generatedAt"])
        save_report(report, path)
        print(f"Report saved to: {path}", file=sys.stderr)

    if args.save:
        record = build_history_record(session.current, pair.baseline, pair.current,
                                      name=args.name)
        try:
            HistoryStore(args.history).add(record)
        except (ValueError, OSError) as e:
            print(f"Error: Cannot use history file {args.history}: {e}", file=sys.stderr)
            return 1
        print(f"Saved as {record.name} ({record.id})", file=sys.stderr)

    if args.sweep:
        param, start, stop, num = args.sweep
        try:
            values = linear_values(float(start), float(stop), int(num))
            result = sweep_parameter(session.baseline, session.current, param, values)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print()
        _print(format_sweep_summary(result), use_color)
        breakeven = find_breakeven_value(
            session.current, param, pair.baseline.total_co2_kg, max(values))
        if breakeven is not None:
            _print(badge(f"Current matches baseline CO2 at {param}", f"{breakeven:.3f}"),
                   use_color)

    return 0


if __name__ == "__main__":
    sys.exit(main())
