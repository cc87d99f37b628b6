from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    COMPANY_NAME: str = "Roofing Contractor"

    # Estimate roll-up defaults (percent)
    OVERHEAD_PCT_DEFAULT: float = 10.0
    PROFIT_PCT_DEFAULT: float = 15.0

    # Pitches above this are flagged for review, never rejected
    SUSPICIOUS_PITCH: float = 24.0

    # Worker threads for batch line pricing — 1 disables the pool
    PRICING_MAX_WORKERS: int = 4

    # Optional JSON pin → material rule table; empty uses built-in rules
    MATERIAL_RULES_PATH: str = ""

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
