import pandas as pd
import pytest

from cma_engine.services.cma_service import generate_cma
from cma_engine.services.excel_export import (
    SHEETS, report_to_frames, report_to_xlsx_bytes, write_report_xlsx
)

integration = pytest.mark.integration


@pytest.fixture
def report(sample_request):
    return generate_cma(sample_request)


@integration
def test_one_frame_per_statement(report):
    frames = report_to_frames(report)

    assert list(frames) == list(SHEETS.values())
    operating = frames["Operating Statement"]
    assert operating.index.name == "Particulars"
    assert operating.loc["Net Sales", "Audited FY-2"] == "500.00"
    assert list(operating.columns)[-1] == "Projected FY-5"


@integration
def test_overdraft_workbook_has_no_repayment_sheet(build_request, tmp_path):
    report = generate_cma(build_request({"netSales": [1, 2]}))

    assert "Repayment Schedule" not in report_to_frames(report)

    target = tmp_path / "overdraft.xlsx"
    write_report_xlsx(report, str(target))
    sheets = pd.read_excel(target, sheet_name=None, index_col=0)
    assert list(sheets) == [s for s in SHEETS.values() if s != "Repayment Schedule"]


@integration
def test_workbook_round_trips_sheet_names(report, tmp_path):
    target = tmp_path / "cma.xlsx"
    write_report_xlsx(report, str(target))

    sheets = pd.read_excel(target, sheet_name=None, index_col=0)
    assert list(sheets) == list(SHEETS.values())
    assert len(sheets["Repayment Schedule"]) == 60


@integration
def test_workbook_bytes_are_a_zip(report):
    assert report_to_xlsx_bytes(report)[:2] == b"PK"
