"""Projected financials and bank credit assessment (CMA data) for working capital and term loan proposals."""

from cma_engine.services.cma_service import CMAService, generate_cma

__all__ = ['CMAService', 'generate_cma']
