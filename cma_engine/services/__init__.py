from .cma_service import CMAService, generate_cma
from .projection_service import ProjectionService
from .depreciation import DepreciationScheduler
from .loan_service import LoanAmortizer
from .ratio_service import RatioService
from .cash_flow_service import CashFlowService
from .ledger import Ledger, YearBuilder
from .sample_data import get_initial_financials, get_default_request
from .excel_export import report_to_frames, write_report_xlsx, report_to_xlsx_bytes
from .observations_service import build_report_summary, get_cma_observations

__all__ = [
    'CMAService',
    'generate_cma',
    'ProjectionService',
    'DepreciationScheduler',
    'LoanAmortizer',
    'RatioService',
    'CashFlowService',
    'Ledger',
    'YearBuilder',
    'get_initial_financials',
    'get_default_request',
    'report_to_frames',
    'write_report_xlsx',
    'report_to_xlsx_bytes',
    'build_report_summary',
    'get_cma_observations'
]
