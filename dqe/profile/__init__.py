"""
Column profiling module for DQE.

Provides quality statistics, cleaning recommendations and anomaly
detection.
"""

from dqe.profile.profiler import (
    ColumnProfiler,
    analyze_column,
    generate_quality_report,
    detect_anomalies,
    quality_summary,
)

__all__ = [
    "ColumnProfiler",
    "analyze_column",
    "generate_quality_report",
    "detect_anomalies",
    "quality_summary",
]
