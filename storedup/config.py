"""Configuration management using Pydantic BaseSettings.

Every setting can be overridden through a ``STOREDUP_``-prefixed environment
variable or a ``.env`` file in the working directory.
"""
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Detector settings."""

    similarity_threshold: float = Field(
        0.85, ge=0.0, le=1.0,
        description="Minimum similarity score for a fuzzy name duplicate",
    )
    rules_file: Optional[str] = Field(
        None, description="YAML file with transliteration folds and suffixes"
    )
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )

    model_config = {
        "env_prefix": "STOREDUP_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Valid options: {valid_levels}')
        return v.upper()

    def validate_configuration(self) -> List[str]:
        """Validate the configuration and return any issues."""
        issues = []

        if self.similarity_threshold < 0.5:
            issues.append(
                "STOREDUP_SIMILARITY_THRESHOLD is very low, unrelated stores will be flagged as duplicates"
            )
        if self.similarity_threshold == 1.0:
            issues.append(
                "STOREDUP_SIMILARITY_THRESHOLD=1.0 disables fuzzy name matching"
            )

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration."""
        from storedup.utils.logger import log_info

        log_info("Configuration loaded",
                 similarity_threshold=self.similarity_threshold,
                 rules_file=self.rules_file or "<default>",
                 log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
