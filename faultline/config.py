"""
Application configuration management.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Error pipeline settings loaded from environment variables."""

    # Error log storage
    error_log_directory: str = "logs"
    max_error_log_size: int = 1000

    # Deployment
    environment: str = "production"

    # Support contacts
    support_email: str = "support@meetingsummarizer.com"
    status_page_url: str = "https://status.meetingsummarizer.com"

    # Pattern detection
    pattern_window_minutes: int = 5
    high_frequency_threshold: int = 5
    component_lookback: int = 10
    component_threshold: int = 3

    # Application
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def show_technical_details(self) -> bool:
        """Whether user-facing responses may carry technical context."""
        return self.environment.strip().lower() != "production"


# Global settings instance
settings = Settings()
