"""
Exporter Module
Exports EstimateResult to Excel and JSON formats.

Excel sheets:
- Summary
- Roles
- Trace
"""

import json
import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

import pandas as pd

from ..models import BUILD_ROLES, ROLES, EstimateResult

logger = logging.getLogger(__name__)


def build_roles_df(result: EstimateResult) -> pd.DataFrame:
    """Per-role breakdown with a TOTAL row."""
    data = []
    for role in ROLES:
        kind = 'build' if role in BUILD_ROLES else 'overhead'
        data.append({
            'Role': role,
            'Kind': kind,
            'Base Hours': result.debug.pre_adjust_hours.get(role, '-') if kind == 'build' else '-',
            'Adjustment': result.debug.role_adjust.get(role, 0.0) if kind == 'build' else '-',
            'Hours': result.hours_by_role[role],
            'Rate': result.debug.rates.get(role, 0.0),
            'Cost': result.cost_by_role[role],
        })

    df = pd.DataFrame(data)

    totals = pd.DataFrame([{
        'Role': 'TOTAL',
        'Kind': '',
        'Base Hours': '',
        'Adjustment': '',
        'Hours': result.p50.hours,
        'Rate': '',
        'Cost': result.p50.cost,
    }])
    return pd.concat([df, totals], ignore_index=True)


def build_summary_df(result: EstimateResult) -> pd.DataFrame:
    """Headline figures."""
    sym = result.currency_symbol
    data = [
        {'Item': 'Build Subtotal Hours', 'Value': result.subtotal_hours, 'Unit': 'h'},
        {'Item': 'Build Subtotal Cost', 'Value': result.subtotal_cost, 'Unit': sym},
        {'Item': 'PM Overhead Hours', 'Value': result.overheads.pm_hours, 'Unit': 'h'},
        {'Item': 'QA Overhead Hours', 'Value': result.overheads.qa_hours, 'Unit': 'h'},
        {'Item': 'P50 Hours', 'Value': result.p50.hours, 'Unit': 'h'},
        {'Item': 'P50 Cost', 'Value': result.p50.cost, 'Unit': sym},
        {'Item': 'P80 Hours', 'Value': result.p80.hours, 'Unit': 'h'},
        {'Item': 'P80 Cost', 'Value': result.p80.cost, 'Unit': sym},
        {'Item': 'Risk Level', 'Value': result.debug.risk_level, 'Unit': ''},
        {'Item': 'Risk Contingency', 'Value': f"{result.debug.risk_pct:.0%}", 'Unit': ''},
        {'Item': 'VAT', 'Value': f"{result.tax.vat_percent:g}%", 'Unit': 'included' if result.tax.vat_included else 'excluded'},
        {'Item': 'P50 Cost incl. VAT', 'Value': result.tax.p50_gross_cost, 'Unit': sym},
        {'Item': 'P80 Cost incl. VAT', 'Value': result.tax.p80_gross_cost, 'Unit': sym},
        {'Item': 'Currency', 'Value': result.currency, 'Unit': ''},
    ]
    return pd.DataFrame(data)


def build_trace_df(result: EstimateResult) -> pd.DataFrame:
    """Hidden levers, multipliers and anomalies, one row each."""
    data = []
    for lever_id in result.debug.hidden_ids:
        data.append({'Type': 'hidden', 'Key': lever_id, 'Detail': ''})
    for key, factor in result.debug.multipliers.items():
        data.append({'Type': 'multiplier', 'Key': key, 'Detail': f"x{factor:g}"})
    for anomaly in result.debug.anomalies:
        data.append({'Type': anomaly.code, 'Key': anomaly.lever_id or '', 'Detail': anomaly.message})

    if not data:
        return pd.DataFrame(columns=['Type', 'Key', 'Detail'])
    return pd.DataFrame(data)


def export_to_excel(
    result: EstimateResult,
    filepath: Optional[Path] = None
) -> BytesIO:
    """
    Export an estimate to an Excel file with multiple sheets.

    Args:
        result: EstimateResult to export
        filepath: Optional file path to save (if None, returns BytesIO)

    Returns:
        BytesIO buffer with Excel file
    """
    summary_df = build_summary_df(result)
    roles_df = build_roles_df(result)
    trace_df = build_trace_df(result)

    buffer = BytesIO()

    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        summary_df.to_excel(writer, sheet_name='Summary', index=False)
        roles_df.to_excel(writer, sheet_name='Roles', index=False)
        trace_df.to_excel(writer, sheet_name='Trace', index=False)

        # Format columns width
        for sheet_name in writer.sheets:
            worksheet = writer.sheets[sheet_name]
            for column in worksheet.columns:
                max_length = max(len(str(cell.value)) for cell in column if cell.value is not None) if any(
                    cell.value is not None for cell in column) else 0
                column_letter = column[0].column_letter
                worksheet.column_dimensions[column_letter].width = min(max_length + 2, 60)

    buffer.seek(0)

    if filepath:
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'wb') as f:
            f.write(buffer.getvalue())
        buffer.seek(0)
        logger.info(f"Excel exported to: {filepath}")

    return buffer


def export_to_json(
    result: EstimateResult,
    filepath: Optional[Path] = None,
    indent: int = 2
) -> str:
    """
    Export an estimate to JSON (the wire contract of EstimateResult.to_dict).

    Args:
        result: EstimateResult to export
        filepath: Optional file path to save
        indent: JSON indentation

    Returns:
        JSON string
    """
    json_str = json.dumps(result.to_dict(), indent=indent, ensure_ascii=False)

    if filepath:
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(json_str)
        logger.info(f"JSON exported to: {filepath}")

    return json_str
