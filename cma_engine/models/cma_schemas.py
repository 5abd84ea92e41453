from pydantic import BaseModel, Field, SerializationInfo, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Union
from enum import Enum


class LoanKind(str, Enum):
    """Facility being appraised"""
    TERM_LOAN = "term-loan"
    OVERDRAFT = "overdraft"


class LoanAssumptions(BaseModel):
    """Proposed bank facility"""
    kind: LoanKind = Field(LoanKind.TERM_LOAN, description="term-loan or overdraft")
    principal_amount: float = Field(0.0, ge=0, description="Sanction amount in INR")
    annual_interest_rate_percent: float = Field(0.0, ge=0, description="Interest rate, e.g. 11 for 11%")
    repayment_years: int = Field(0, ge=0, le=30, description="Tenor in years (term loans only)")

    @field_validator('kind', mode='before')
    @classmethod
    def normalize_kind(cls, v):
        if isinstance(v, str) and v.strip().lower() in ("od", "cc/od", "cash-credit"):
            return LoanKind.OVERDRAFT
        return v

    @property
    def is_term_loan(self) -> bool:
        return self.kind == LoanKind.TERM_LOAN

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class GrowthAssumptions(BaseModel):
    """Year-on-year change applied to the operating statement, one value per projected year"""
    revenue_growth_percent: List[float] = Field(default_factory=list)
    expense_change_percent: List[float] = Field(default_factory=list)

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class FixedAsset(BaseModel):
    """A block of assets depreciated on written-down value"""
    id: int
    name: str = ""
    cost: float = Field(0.0, ge=0)
    depreciation_rate_percent: float = Field(0.0, ge=0)
    addition_year_index: int = Field(0, ge=0, description="Ledger year the asset is put to use (0 = owned at start)")

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class YearFigures(BaseModel):
    """
    Every line item of the CMA ledger for one fiscal year, in INR.
    Frozen: a year is assembled once and never modified afterwards.
    """
    # Operating statement
    net_sales: float = 0.0
    other_op_income: float = 0.0
    raw_materials: float = 0.0
    direct_wages: float = 0.0
    power_fuel: float = 0.0
    depreciation: float = 0.0
    admin_salary: float = 0.0
    rent: float = 0.0
    selling_expenses: float = 0.0
    other_expenses: float = 0.0
    interest: float = 0.0
    tax: float = 0.0

    # Balance sheet - Liabilities
    share_capital: float = 0.0
    reserves_surplus: float = 0.0
    term_loan: float = 0.0
    unsecured_loan: float = 0.0
    sundry_creditors: float = 0.0
    other_liabilities: float = 0.0

    # Balance sheet - Assets
    gross_fixed_assets: float = 0.0
    acc_depreciation: float = 0.0
    investments: float = 0.0
    inventory: float = 0.0
    sundry_debtors: float = 0.0
    cash_bank: float = 0.0
    other_current_assets: float = 0.0

    # ----- Profit waterfall -----
    @property
    def gross_operating_income(self) -> float:
        return self.net_sales + self.other_op_income

    @property
    def cost_of_sales(self) -> float:
        return self.raw_materials + self.direct_wages + self.power_fuel

    @property
    def gross_profit(self) -> float:
        return self.gross_operating_income - self.cost_of_sales

    @property
    def pbdit(self) -> float:
        return (self.gross_profit - self.admin_salary - self.rent
                - self.selling_expenses - self.other_expenses)

    @property
    def pbit(self) -> float:
        return self.pbdit - self.depreciation

    @property
    def pbt(self) -> float:
        return self.pbit - self.interest

    @property
    def pat(self) -> float:
        return self.pbt - self.tax

    # ----- Balance sheet subtotals -----
    @property
    def net_worth(self) -> float:
        return self.share_capital + self.reserves_surplus

    @property
    def total_debt(self) -> float:
        return self.term_loan + self.unsecured_loan

    @property
    def total_outside_liabilities(self) -> float:
        """TOL = Term Loan + Unsecured Loan + Creditors + Other Liabilities"""
        return self.total_debt + self.sundry_creditors + self.other_liabilities

    @property
    def total_liabilities(self) -> float:
        return self.net_worth + self.total_outside_liabilities

    @property
    def net_fixed_assets(self) -> float:
        return self.gross_fixed_assets - self.acc_depreciation

    @property
    def current_assets(self) -> float:
        return self.inventory + self.sundry_debtors + self.cash_bank + self.other_current_assets

    @property
    def current_liabilities(self) -> float:
        """Other Current Liabilities, excluding bank borrowings"""
        return self.sundry_creditors + self.other_liabilities

    @property
    def working_capital_gap(self) -> float:
        return self.current_assets - self.current_liabilities

    @property
    def total_assets(self) -> float:
        return self.net_fixed_assets + self.investments + self.current_assets

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "frozen": True, "extra": "forbid"}


LINE_ITEMS = tuple(YearFigures.model_fields)

# Accept both the Python name and the camelCase name the web screens use
_LINE_ITEM_LOOKUP = {**{name: name for name in LINE_ITEMS},
                     **{to_camel(name): name for name in LINE_ITEMS}}


def canonical_line_item(name: str) -> Optional[str]:
    """Map 'netSales' or 'net_sales' to 'net_sales'; None if unknown"""
    return _LINE_ITEM_LOOKUP.get(name)


class CMARequest(BaseModel):
    """Everything the engine needs for one report"""
    historical_ledger: Dict[str, List[float]] = Field(..., description="Line item -> [FY-2, FY-1] audited figures")
    projected_year_count: int = Field(..., ge=1)
    growth_assumptions: GrowthAssumptions = Field(default_factory=GrowthAssumptions)
    loan_assumptions: LoanAssumptions = Field(default_factory=LoanAssumptions)
    fixed_assets: List[FixedAsset] = Field(default_factory=list)

    @field_validator('historical_ledger')
    @classmethod
    def check_historical_ledger(cls, ledger: Dict[str, List[float]]) -> Dict[str, List[float]]:
        normalized = {}
        for name, values in ledger.items():
            canonical = canonical_line_item(name)
            if canonical is None:
                raise ValueError(f"Unknown line item '{name}'")
            if len(values) != 2:
                raise ValueError(f"Line item '{name}' needs exactly 2 historical values, got {len(values)}")
            normalized[canonical] = list(values)
        return normalized

    @field_serializer('historical_ledger')
    def serialize_historical_ledger(self, ledger: Dict[str, List[float]], info: SerializationInfo):
        # Line items follow the wire convention of the field names
        if info.by_alias:
            return {to_camel(name): values for name, values in ledger.items()}
        return ledger

    @model_validator(mode='after')
    def check_growth_horizon(self):
        n = self.projected_year_count
        growth = self.growth_assumptions
        if len(growth.revenue_growth_percent) < n:
            raise ValueError(f"revenueGrowthPercent needs {n} values, got {len(growth.revenue_growth_percent)}")
        if len(growth.expense_change_percent) < n:
            raise ValueError(f"expenseChangePercent needs {n} values, got {len(growth.expense_change_percent)}")
        return self

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


Cell = Union[str, int]


class ReportTable(BaseModel):
    """A rendered statement: header labels plus [label, value, value, ...] rows"""
    headers: List[str]
    body: List[List[Cell]] = Field(default_factory=list)


class CMAReport(BaseModel):
    """Complete CMA data package"""
    operating_statement: ReportTable
    balance_sheet: ReportTable
    cash_flow: ReportTable
    ratio_analysis: ReportTable
    fund_flow: ReportTable
    mpbf: ReportTable
    repayment_schedule: ReportTable
    depreciation_schedule: ReportTable

    # Funding gaps and similar signals for the analyst
    flags: List[str] = Field(default_factory=list)

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class ObservationsResponse(BaseModel):
    """Credit analyst commentary on a generated report"""
    observations: str
    headers: List[str] = Field(default_factory=list, description="Year columns the commentary refers to")

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
