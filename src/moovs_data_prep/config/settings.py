"""
Configuration settings for Moovs data prep
"""
from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Configuration settings for import runs"""

    # Placeholder generation
    default_base_phone: str = "+1 202-555-0100"
    placeholder_email_domain: str = "import.moovs.com"
    placeholder_email_domains: List[str] = ["import.moovs.com", "placeholder.moovs.com"]

    # Phone parsing
    default_region: str = "US"

    # Input handling
    max_file_size_mb: int = 100
    header_overlap_threshold: float = 0.5
    format_detection_min_matches: int = 2

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    class Config:
        env_file = ".env"
        env_prefix = "MOOVS_PREP_"


# Global settings instance
settings = Settings()
