"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union
from decimal import Decimal
import enum


class SplitScope(str, enum.Enum):
    """Who shares an expense that has no explicit splits."""
    ALL_PARTICIPANTS = "all_participants"
    EXCLUDE_PAYER = "exclude_payer"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Application
    APP_NAME: str = "TripLedger"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:5173"]
    
    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v
    
    # Ledger
    SPLIT_TOLERANCE: Decimal = Decimal("0.01")  # Max deviation between split shares and expense amount
    MONEY_QUANTUM: Decimal = Decimal("0.01")  # Smallest currency unit used for rounding
    DEFAULT_SPLIT_SCOPE: SplitScope = SplitScope.ALL_PARTICIPANTS
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
