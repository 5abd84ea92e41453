# cma_engine/services/loan_service.py
"""
Term loan / overdraft servicing.

Two views of the same facility:
  * annual figures for the projection (straight-line principal, flat interest
    on the balance outstanding), and
  * a monthly EMI schedule for disclosure, which the projection never reads.
"""

from typing import List, Tuple

from cma_engine.config.settings import Settings, settings as default_settings
from cma_engine.models.cma_schemas import LoanAssumptions

# First projected year; the new facility is drawn down here
DRAWDOWN_YEAR = 2

RepaymentRow = Tuple[int, float, float, float, float]   # month, EMI, principal, interest, closing


class LoanAmortizer:

    def __init__(self, loan: LoanAssumptions, settings: Settings = default_settings):
        self.loan = loan
        self.settings = settings

    # ========== ANNUAL VIEW (feeds the projection) ==========
    @property
    def annual_repayment(self) -> float:
        """Straight-line principal; zero for overdrafts and for a zero tenor"""
        if not self.loan.is_term_loan or self.loan.repayment_years <= 0:
            return 0.0
        return self.loan.principal_amount / self.loan.repayment_years

    def new_loan_outstanding(self, year_index: int) -> float:
        """Balance of the new facility on which year_index's interest is charged"""
        if year_index < DRAWDOWN_YEAR:
            return 0.0
        years_since = year_index - DRAWDOWN_YEAR
        return max(0.0, self.loan.principal_amount - self.annual_repayment * years_since)

    def annual_interest(self, year_index: int, opening_term_loan: float) -> float:
        """
        Interest = Carried Term Loan x 10% (assumed)
                 + New Loan Outstanding x Sanctioned Rate
        """
        old_loan_interest = (opening_term_loan * self.settings.OLD_LOAN_INTEREST_RATE
                             if opening_term_loan > 0 else 0.0)
        new_loan_interest = (self.new_loan_outstanding(year_index)
                             * self.loan.annual_interest_rate_percent / 100)
        return old_loan_interest + new_loan_interest

    def principal_due(self, year_index: int) -> float:
        """Instalment counted in DSCR: one per year from drawdown, for the tenor"""
        if year_index < DRAWDOWN_YEAR:
            return 0.0
        if year_index - DRAWDOWN_YEAR >= self.loan.repayment_years:
            return 0.0
        return self.annual_repayment

    def closing_term_loan(self, year_index: int, opening_term_loan: float) -> float:
        """
        Drawdown year: Opening + Sanction - part repayment of any existing loan.
        Later years:   Opening - straight-line instalment, until the new loan is repaid.
        """
        if year_index == DRAWDOWN_YEAR:
            part_repayment = self.settings.DRAWDOWN_PART_REPAYMENT if opening_term_loan > 0 else 0.0
            return opening_term_loan + self.loan.principal_amount - part_repayment

        repayment = min(self.annual_repayment, self.new_loan_outstanding(year_index - 1))
        return opening_term_loan - repayment

    # ========== MONTHLY VIEW (disclosure) ==========
    def emi(self) -> float:
        """
        EMI = P x r x (1 + r)^n / ((1 + r)^n - 1)
        r = monthly rate, n = months. A 0% loan repays P / n a month.
        """
        months = self.loan.repayment_years * 12
        if months <= 0:
            return 0.0
        principal = self.loan.principal_amount
        r = self.loan.annual_interest_rate_percent / 100 / 12
        if r == 0:
            return principal / months
        growth = (1 + r) ** months
        return principal * r * growth / (growth - 1)

    def repayment_schedule(self) -> List[RepaymentRow]:
        """Month-by-month amortisation; empty unless a term loan with a tenor"""
        if not self.loan.is_term_loan or self.loan.repayment_years <= 0:
            return []

        months = self.loan.repayment_years * 12
        r = self.loan.annual_interest_rate_percent / 100 / 12
        emi = self.emi()
        balance = self.loan.principal_amount
        rows: List[RepaymentRow] = []

        for month in range(1, months + 1):
            interest = balance * r
            if month == months:
                # Final instalment clears the rounding residue
                principal = balance
            else:
                principal = emi - interest
            balance -= principal
            rows.append((month, emi, principal, interest, balance))

        return rows
