import pytest
from pydantic import ValidationError

from cma_engine.models.cma_schemas import CMARequest, LoanAssumptions, LoanKind
from cma_engine.services.cma_service import CMAService, generate_cma

integration = pytest.mark.integration


def row(table, label):
    return next(r for r in table.body if r[0] == label)


@integration
def test_end_to_end_net_sales_in_lakhs(scenario_request):
    report = generate_cma(scenario_request)

    assert report.operating_statement.headers == [
        "Particulars", "Audited FY-2", "Audited FY-1", "Projected FY-1"
    ]
    assert row(report.operating_statement, "Net Sales")[1:] == ["500.00", "600.00", "660.00"]
    assert row(report.operating_statement, "Raw Materials Consumed")[3] == "330.00"
    assert row(report.operating_statement, "Interest")[3] == "8.00"


@integration
def test_every_table_is_rectangular(sample_request):
    report = generate_cma(sample_request)

    for table in (report.operating_statement, report.balance_sheet, report.cash_flow,
                  report.ratio_analysis, report.fund_flow, report.mpbf,
                  report.repayment_schedule, report.depreciation_schedule):
        assert table.body
        for r in table.body:
            assert len(r) == len(table.headers)


@integration
def test_fund_flow_headers_skip_first_audited_year(sample_request):
    report = generate_cma(sample_request)

    assert report.fund_flow.headers[1] == "Audited FY-1"
    assert len(report.fund_flow.headers) == len(report.balance_sheet.headers) - 1


@integration
def test_balance_sheet_table_tallies(sample_request):
    report = generate_cma(sample_request)
    liabilities = row(report.balance_sheet, "Total Liabilities & Equity")
    assets = row(report.balance_sheet, "Total Assets")

    for column in range(1, len(liabilities)):
        assert abs(float(liabilities[column]) - float(assets[column])) <= 0.01
    assert row(report.balance_sheet, "LIABILITIES")[1:] == [""] * 7


@integration
def test_repayment_schedule_table(scenario_request):
    report = generate_cma(scenario_request)
    schedule = report.repayment_schedule

    assert schedule.headers == ["Month", "EMI", "Principal", "Interest", "Outstanding Balance"]
    assert len(schedule.body) == 60
    assert schedule.body[0][0] == 1
    assert schedule.body[-1][4] == "0.00"
    assert sum(float(r[2]) for r in schedule.body) == pytest.approx(80.00, abs=0.3)


@integration
def test_overdraft_report_has_empty_schedule(build_request):
    request = build_request(
        {"netSales": [1_000_000, 1_200_000]},
        loan=LoanAssumptions(kind=LoanKind.OVERDRAFT, principal_amount=500_000,
                             annual_interest_rate_percent=12),
    )
    report = generate_cma(request)

    assert report.repayment_schedule.body == []


@integration
def test_no_non_finite_values_reach_the_report(build_request):
    # Nothing but zeros: every ratio denominator is zero
    request = build_request({}, years=2)
    report = generate_cma(request)

    for table in (report.operating_statement, report.balance_sheet, report.cash_flow,
                  report.ratio_analysis, report.fund_flow, report.mpbf):
        for r in table.body:
            for cell in r[1:]:
                assert "nan" not in str(cell).lower()
                assert "inf" not in str(cell).lower()
    assert row(report.ratio_analysis, "Current Ratio")[1:] == ["N/A"] * 4


@integration
def test_negative_cash_surfaces_in_report_and_flags(build_request):
    from cma_engine.models.cma_schemas import FixedAsset

    request = build_request(
        {"shareCapital": [100, 100], "cashBank": [100, 100]},
        fixed_assets=[FixedAsset(id=1, name="Boiler", cost=10_000_000,
                                 depreciation_rate_percent=10, addition_year_index=2)],
    )
    report = generate_cma(request)

    assert row(report.balance_sheet, "Cash & Bank")[3] == "-100.00"
    assert report.flags == ["Funding gap: negative cash (-100.00 lakhs) in Projected FY-1"]


@integration
def test_depreciation_schedule_lists_each_asset(sample_request):
    report = generate_cma(sample_request)
    labels = [r[0] for r in report.depreciation_schedule.body]

    assert labels == ["Plant & Machinery @ 15%", "Office Equipment @ 20%", "Total Depreciation"]
    # Plant & Machinery, Projected FY-1: 10L x 0.85^2 x 15%
    assert report.depreciation_schedule.body[0][3] == "1.08"
    # No per-asset split for the audited years
    assert report.depreciation_schedule.body[0][1:3] == ["", ""]


@integration
def test_total_depreciation_matches_operating_statement(sample_request):
    report = generate_cma(sample_request)
    total = row(report.depreciation_schedule, "Total Depreciation")

    assert total[1:] == row(report.operating_statement, "Depreciation")[1:]
    assert total[1:3] == ["15.00", "18.00"]


@integration
def test_ledger_is_returned_not_kept(scenario_request):
    service = CMAService()
    report, ledger = service.generate_with_ledger(scenario_request)

    assert ledger.is_complete
    assert report.operating_statement.headers[1:] == ledger.labels
    assert not hasattr(service, "ledger")


@integration
def test_zero_projected_years_rejected(scenario_request):
    with pytest.raises(ValidationError):
        CMARequest(historical_ledger={}, projected_year_count=0)

    unchecked = scenario_request.model_copy(update={"projected_year_count": 0})
    with pytest.raises(ValueError):
        generate_cma(unchecked)


@integration
def test_long_tenor_is_rejected_before_the_engine():
    with pytest.raises(ValidationError):
        LoanAssumptions(kind=LoanKind.TERM_LOAN, principal_amount=1_000_000,
                        annual_interest_rate_percent=12, repayment_years=10_000)


@integration
def test_longest_allowed_tenor_completes(build_request):
    request = build_request(
        {"netSales": [1_000_000, 1_200_000]},
        loan=LoanAssumptions(kind=LoanKind.TERM_LOAN, principal_amount=1_000_000,
                             annual_interest_rate_percent=12, repayment_years=30),
    )
    report = generate_cma(request)

    assert len(report.repayment_schedule.body) == 360
    assert report.repayment_schedule.body[-1][4] == "0.00"


@integration
def test_sample_fund_flow_sources_equal_uses(sample_request):
    report = generate_cma(sample_request)
    sources = row(report.fund_flow, "TOTAL SOURCES")
    uses = row(report.fund_flow, "TOTAL USES")

    for column in range(1, len(sources)):
        assert abs(float(sources[column]) - float(uses[column])) <= 0.02
