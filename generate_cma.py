import logging
import sys

from cma_engine.services.cma_service import generate_cma
from cma_engine.services.excel_export import write_report_xlsx
from cma_engine.services.sample_data import get_default_request

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# ==========================================
# 1. INPUT DATA & ASSUMPTIONS
# ==========================================

request = get_default_request()

# ==========================================
# 2. CALCULATION ENGINE
# ==========================================

report = generate_cma(request)

for flag in report.flags:
    print(f"WARNING: {flag}")

# ==========================================
# 3. EXPORT
# ==========================================

file_name = sys.argv[1] if len(sys.argv) > 1 else 'CMA_Report.xlsx'
try:
    write_report_xlsx(report, file_name)
    print(f"SUCCESS. File '{file_name}' created.")
except OSError as e:
    print(f"Error writing file: {e}")
    sys.exit(1)
