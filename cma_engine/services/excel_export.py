import io
import logging
from typing import Dict, Union, BinaryIO

import pandas as pd

from cma_engine.models.cma_schemas import CMAReport, ReportTable

logger = logging.getLogger(__name__)

# Report field -> sheet name
SHEETS = {
    "operating_statement": "Operating Statement",
    "balance_sheet": "Balance Sheet",
    "cash_flow": "Cash Flow",
    "ratio_analysis": "Ratio Analysis",
    "fund_flow": "Fund Flow",
    "mpbf": "MPBF",
    "repayment_schedule": "Repayment Schedule",
    "depreciation_schedule": "Depreciation Schedule",
}


def table_to_frame(table: ReportTable) -> pd.DataFrame:
    """First header labels the row index; the rest become columns"""
    index_label, *columns = table.headers
    df = pd.DataFrame([row[1:] for row in table.body], columns=columns,
                      index=[row[0] for row in table.body])
    df.index.name = index_label
    return df


def report_to_frames(report: CMAReport) -> Dict[str, pd.DataFrame]:
    """Sheet name -> frame. An empty repayment schedule (overdraft) gets no sheet."""
    frames = {}
    for field, sheet in SHEETS.items():
        table = getattr(report, field)
        if field == "repayment_schedule" and not table.body:
            continue
        frames[sheet] = table_to_frame(table)
    return frames


def write_report_xlsx(report: CMAReport, target: Union[str, BinaryIO]) -> None:
    """
    One sheet per statement. Columns are sized to their widest cell.
    target is a path or a writable binary buffer.
    """
    frames = report_to_frames(report)
    with pd.ExcelWriter(target, engine='openpyxl') as writer:
        for sheet_name, df in frames.items():
            df.to_excel(writer, sheet_name=sheet_name)
            worksheet = writer.sheets[sheet_name]
            for column_cells in worksheet.columns:
                width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column_cells)
                worksheet.column_dimensions[column_cells[0].column_letter].width = width + 2
    logger.info(f"CMA workbook written with {len(frames)} sheets")


def report_to_xlsx_bytes(report: CMAReport) -> bytes:
    buffer = io.BytesIO()
    write_report_xlsx(report, buffer)
    return buffer.getvalue()
