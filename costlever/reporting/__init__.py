"""
Reporting Module for the estimator
Rounding, result assembly, and Excel/JSON export.

Modules:
- rounding: half-away-from-zero rounding helpers
- assembler: builds the rounded EstimateResult
- exporter: Excel and JSON export
"""

from .rounding import round_half_away, round_map
from .assembler import assemble_result
from .exporter import (
    build_roles_df,
    build_summary_df,
    build_trace_df,
    export_to_excel,
    export_to_json,
)

__all__ = [
    "round_half_away",
    "round_map",
    "assemble_result",
    "build_roles_df",
    "build_summary_df",
    "build_trace_df",
    "export_to_excel",
    "export_to_json",
]
