from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Display
    LAKH: float = 1_00_000

    # Operating statement
    TAX_RATE: float = 0.30

    # Term loan conventions
    OLD_LOAN_INTEREST_RATE: float = 0.10      # Carried balance, not the new facility
    DRAWDOWN_PART_REPAYMENT: float = 15_00_000

    # Working capital holding periods (months)
    CREDITOR_MONTHS: float = 2.0
    INVENTORY_MONTHS: float = 1.5
    DEBTOR_MONTHS: float = 2.0

    # Tandon Committee margin on current assets
    MPBF_MARGIN: float = 0.25

    # AI observations (Gemini)
    GEMINI_API_KEY: str = ""
    OBSERVATION_MODELS: List[str] = ["gemini-2.5-flash", "gemini-2.0-flash"]

    # Application
    APP_TITLE: str = "CMA Projection Engine"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_prefix = "CMA_"
        env_file = ".env"
        extra = "ignore"

settings = Settings()
