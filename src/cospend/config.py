"""Configuration management for Cospend."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COSPEND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Decimal places of the project currency
    precision: int = Field(default=2, ge=0, le=8)

    # Reimbursement bills
    reimbursement_category_id: int = -11  # Hard-coded "Reimbursement" category
    reimbursement_payment_mode: str = "n"  # No payment mode

    # Display
    currency_symbol: str = "$"


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the COSPEND_* environment variables "
            f"and your .env file.\n"
            f"Error: {e}"
        ) from e
