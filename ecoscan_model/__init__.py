"""
EcoScan Lifecycle Carbon & Cost Model

Estimates the lifecycle footprint (training + inference + embodied hardware)
and energy cost of an AI workload, grades it A to E, and lets reversible
optimization strategies be toggled against a frozen baseline.

Example usage (programmatic):
    from ecoscan_model import AssessmentSession, load_config

    session = AssessmentSession.start(load_config("workload.json"))
    session.toggle("training_region")
    pair = session.get_metrics()
    print(f"{pair.baseline.grade} -> {pair.current.grade}")

Example usage (imported candidate):
    from ecoscan_model import session_from_file, build_report, save_report

    session = session_from_file("extracted.json")
    report = build_report(session.current, session.get_metrics().current, "GreenOps")
    save_report(report, "report.json")

CLI usage:
    python -m ecoscan_model workload.json --apply-all
"""

from .reference import (
    HardwareProfile,
    RegionProfile,
    HARDWARE_OPTIONS,
    REGION_OPTIONS,
    ENERGY_COST_PER_KWH,
    get_hardware,
    get_training_region,
    get_inference_region,
    lowest_carbon_region,
    most_efficient_hardware,
)

from .config import (
    WorkloadConfig,
    DEFAULT_CONFIG,
    sanitize_config,
    find_config_issues,
    load_config,
    save_config,
)

from .model import (
    LifecycleMetrics,
    estimate,
    grade_for,
    compare_metrics,
    lifetime_inference_co2_kg,
)

from .strategies import (
    OptimizationStrategy,
    StrategyStatus,
    StrategyState,
    StrategyProjection,
    STRATEGIES,
    get_strategy,
    evaluate_strategies,
    toggle_strategy,
    apply_all,
    project_strategy,
)

from .session import (
    AssessmentSession,
    MetricsPair,
)

from .importer import (
    ImportParseFailure,
    FALLBACK_CONFIG,
    parse_candidate,
    load_candidate,
    config_from_candidate,
    import_config,
    session_from_file,
)

from .report import (
    HistoryRecord,
    HistoryStore,
    build_history_record,
    build_report,
    save_report,
    savings_euro,
    carbon_offset_percent,
)

from .sweep import (
    SweepResult,
    sweep_parameter,
    find_breakeven_value,
)

__all__ = [
    # Reference tables
    'HardwareProfile',
    'RegionProfile',
    'HARDWARE_OPTIONS',
    'REGION_OPTIONS',
    'ENERGY_COST_PER_KWH',
    'get_hardware',
    'get_training_region',
    'get_inference_region',
    'lowest_carbon_region',
    'most_efficient_hardware',
    # Config
    'WorkloadConfig',
    'DEFAULT_CONFIG',
    'sanitize_config',
    'find_config_issues',
    'load_config',
    'save_config',
    # Core model
    'LifecycleMetrics',
    'estimate',
    'grade_for',
    'compare_metrics',
    'lifetime_inference_co2_kg',
    # Strategies
    'OptimizationStrategy',
    'StrategyStatus',
    'StrategyState',
    'StrategyProjection',
    'STRATEGIES',
    'get_strategy',
    'evaluate_strategies',
    'toggle_strategy',
    'apply_all',
    'project_strategy',
    # Session
    'AssessmentSession',
    'MetricsPair',
    # Import
    'ImportParseFailure',
    'FALLBACK_CONFIG',
    'parse_candidate',
    'load_candidate',
    'config_from_candidate',
    'import_config',
    'session_from_file',
    # Reports and history
    'HistoryRecord',
    'HistoryStore',
    'build_history_record',
    'build_report',
    'save_report',
    'savings_euro',
    'carbon_offset_percent',
    # Sweeps
    'SweepResult',
    'sweep_parameter',
    'find_breakeven_value',
]

__version__ = '0.1.0'
