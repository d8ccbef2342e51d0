"""Configuration management using Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings, overridable through ``VUSD_*`` environment variables."""

    # General
    log_level: str = Field(default="INFO", description="Logging level")

    # Fees (numerator over max)
    max_minting_fee: int = Field(default=10_000, description="Minting fee denominator and upper bound")
    max_redeem_fee: int = Field(default=10_000, description="Redeem fee denominator and upper bound")
    default_minting_fee: int = Field(default=0, description="Minting fee set at Minter deployment")
    default_redeem_fee: int = Field(default=0, description="Redeem fee set at Redeemer deployment")

    # Simulation
    random_seed: int = Field(default=42, description="Random seed for reproducibility")
    n_holders: int = Field(default=10, description="Number of simulated VUSD holders")
    n_steps: int = Field(default=200, description="Number of simulated actions")
    blocks_per_step: int = Field(default=100, description="Blocks mined between simulated actions")
    supply_rate_per_block: int = Field(
        default=23_782_343_987,
        description="cToken supply rate per block, 1e18 mantissa (~5% APY at 2.1M blocks/year)"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "VUSD_"
        case_sensitive = False


# Global settings instance
settings = Settings()
