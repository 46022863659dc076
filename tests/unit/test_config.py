"""
Unit tests for configuration management.
"""

import pytest
from unittest.mock import patch
import os


def test_settings_loads_from_environment():
    """Test that settings can be loaded from environment variables."""
    with patch.dict(os.environ, {
        'ERROR_LOG_DIRECTORY': '/var/log/faultline',
        'MAX_ERROR_LOG_SIZE': '250',
        'ENVIRONMENT': 'development',
        'SUPPORT_EMAIL': 'help@example.com',
        'STATUS_PAGE_URL': 'https://status.example.com',
        'LOG_LEVEL': 'DEBUG',
        'HIGH_FREQUENCY_THRESHOLD': '8',
    }):
        from faultline.config import Settings
        settings = Settings()

        assert settings.error_log_directory == '/var/log/faultline'
        assert settings.max_error_log_size == 250
        assert settings.environment == 'development'
        assert settings.support_email == 'help@example.com'
        assert settings.status_page_url == 'https://status.example.com'
        assert settings.log_level == 'DEBUG'
        assert settings.high_frequency_threshold == 8


def test_settings_has_default_values():
    """Test that settings have appropriate default values."""
    with patch.dict(os.environ, {}, clear=True):
        from faultline.config import Settings
        settings = Settings(_env_file=None)

        assert settings.error_log_directory == 'logs'
        assert settings.max_error_log_size == 1000
        assert settings.environment == 'production'
        assert settings.support_email == 'support@meetingsummarizer.com'
        assert settings.status_page_url == 'https://status.meetingsummarizer.com'
        assert settings.pattern_window_minutes == 5
        assert settings.high_frequency_threshold == 5
        assert settings.component_lookback == 10
        assert settings.component_threshold == 3
        assert settings.log_level == 'INFO'


@pytest.mark.parametrize("environment,expected", [
    ("production", False),
    ("PRODUCTION", False),
    ("development", True),
    ("staging", True),
])
def test_show_technical_details(environment, expected):
    """Test technical details are only shown outside production."""
    from faultline.config import Settings
    settings = Settings(_env_file=None, environment=environment)

    assert settings.show_technical_details is expected
