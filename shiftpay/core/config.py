from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SHIFTPAY_")

    APP_NAME: str = Field("shiftpay", description="Root logger name")
    LOG_LEVEL: str = Field("INFO", description="Logging level for the engine loggers")
    LOG_PATH: str = Field("./data/logs", description="Directory for rotating log files")

    # Jurisdiction defaults (Australia, 2025-26)
    JURISDICTION: str = Field("AU", description="Country code of the tax/holiday jurisdiction")
    VISA_TYPE: str = Field("domestic", description="domestic, student or working_holiday")

    # Student visa work-hour cap per rolling fortnight
    VISA_HOURS_CAP: float = 48.0
    NEAR_LIMIT_RATIO: float = 0.83

    # Fiscal year withholding simulation
    PAY_CYCLE: str = Field("fortnightly", description="weekly, fortnightly or monthly")
    WITHHOLDING_METHOD: str = Field("annualised", description="annualised or schedule")

    # Largest accepted gap between a bracket's base tax and the tax at the previous boundary
    BRACKET_TOLERANCE: float = 1.0

    def jurisdiction(self):
        from shiftpay.tax.jurisdictions import get_jurisdiction
        return get_jurisdiction(self.JURISDICTION, tolerance=self.BRACKET_TOLERANCE)


def get_settings(**overrides) -> Settings:
    """Build settings from the environment, with keyword overrides taking precedence."""
    return Settings(**overrides)
