# cma_engine/routers/cma.py
"""
CMA Report API Endpoints.
Generates projected statements, exports them as a workbook and gets AI observations on them.
"""

import io
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from cma_engine.models.cma_schemas import CMARequest, CMAReport, ObservationsResponse
from cma_engine.services.cma_service import generate_cma
from cma_engine.services.excel_export import report_to_xlsx_bytes
from cma_engine.services.observations_service import ObservationsUnavailable, get_cma_observations
from cma_engine.services.sample_data import get_default_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/cma", tags=["cma"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/sample", response_model=CMARequest)
async def sample_request():
    """
    Demo company with default assumptions, ready to post to /generate.
    """
    return get_default_request()


@router.post("/generate", response_model=CMAReport)
async def generate_report(request: CMARequest):
    """
    Project the audited figures and return every CMA table.
    """
    try:
        return generate_cma(request)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Error generating CMA report: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/export")
async def export_report(request: CMARequest):
    """
    Same as /generate, delivered as an Excel workbook (one sheet per statement).
    """
    try:
        report = generate_cma(request)
        content = report_to_xlsx_bytes(report)

        return StreamingResponse(
            io.BytesIO(content),
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": 'attachment; filename="CMA_Report.xlsx"'}
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Error exporting CMA report: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/observations", response_model=ObservationsResponse)
async def report_observations(request: CMARequest):
    """
    Credit analyst commentary (Gemini) on the generated report: sales growth,
    margins, liquidity, leverage, DSCR and an overall recommendation.
    """
    try:
        report = generate_cma(request)
        observations = await get_cma_observations(report, request.loan_assumptions)

        return ObservationsResponse(
            observations=observations,
            headers=report.operating_statement.headers[1:],
        )

    except HTTPException:
        raise
    except ObservationsUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Error getting CMA observations: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
