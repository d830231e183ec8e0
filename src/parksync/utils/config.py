"""
Park Sync - Configuration Management
Handles environment configuration with AWS SSM Parameter Store for production
and python-dotenv for local development.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded."""
    pass


class Config:
    """
    Configuration manager with dual-mode operation:
    - Local: Reads from .env file via python-dotenv
    - Production: Reads from AWS SSM Parameter Store
    """

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'local')
        self._ssm_client = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration value from SSM (production) or environment (local).

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if self.environment == 'production':
            return self._get_from_ssm(key, default)
        return os.getenv(key, default)

    def require(self, key: str) -> str:
        """
        Fetch a configuration value that must be present.

        Raises:
            ConfigurationError: If the value is missing or empty
        """
        value = self.get(key)
        if not value:
            raise ConfigurationError(f"{key} not configured")
        return value

    def _get_from_ssm(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration from AWS SSM Parameter Store.

        Raises:
            ConfigurationError: If parameter not found and no default provided,
                               or if AWS credentials/permissions are invalid
        """
        ssm_prefix = os.getenv('AWS_SSM_PREFIX', '/parksync')
        parameter_name = f"{ssm_prefix}/{key}"

        if self._ssm_client is None:
            import boto3
            self._ssm_client = boto3.client(
                'ssm',
                region_name=os.getenv('AWS_REGION', 'us-east-1')
            )

        try:
            response = self._ssm_client.get_parameter(
                Name=parameter_name,
                WithDecryption=True
            )
            return response['Parameter']['Value']

        except self._ssm_client.exceptions.ParameterNotFound:
            if default is not None:
                return default
            return None

        except Exception as e:
            error_type = type(e).__name__
            if default is not None:
                logging.warning(
                    f"Failed to fetch SSM parameter '{key}': {error_type}: {e}. "
                    f"Using default value."
                )
                return default
            raise ConfigurationError(
                f"Failed to fetch parameter '{key}' from SSM: {error_type}: {e}. "
                f"Check AWS credentials, IAM permissions, and network connectivity."
            )

    def get_int(self, key: str, default: int) -> int:
        """Get configuration value as integer, falling back to default on bad input."""
        value = self.get(key, str(default))
        try:
            return int(value)
        except (ValueError, TypeError) as e:
            logging.warning(
                f"Invalid integer for config key '{key}': '{value}'. "
                f"Using default={default}. Error: {e}"
            )
            return default

    def get_float(self, key: str, default: float) -> float:
        """Get configuration value as float, falling back to default on bad input."""
        value = self.get(key, str(default))
        try:
            return float(value)
        except (ValueError, TypeError) as e:
            logging.warning(
                f"Invalid float for config key '{key}': '{value}'. "
                f"Using default={default}. Error: {e}"
            )
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        """Get configuration value as boolean."""
        value = self.get(key, str(default))
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == 'production'

    @property
    def is_local(self) -> bool:
        """Check if running in local development environment."""
        return self.environment == 'local'


# Global configuration instance
config = Config()


# Store configuration (absent URL = simulated writes)
DATABASE_URL = config.get('DATABASE_URL', '')
DATABASE_PASSWORD = config.get('DATABASE_PASSWORD', '')

# Upstream credentials
OPENWEATHER_API_KEY = config.get('OPENWEATHER_API_KEY', '')

# Flask configuration
FLASK_ENV = config.get('FLASK_ENV', 'development')
FLASK_DEBUG = config.get_bool('FLASK_DEBUG', False)
SECRET_KEY = config.get('SECRET_KEY', 'dev-secret-key-change-in-production')

# Logging configuration
LOG_LEVEL = config.get('LOG_LEVEL', 'INFO')

# Fetch and retry settings
HTTP_TIMEOUT_SECONDS = config.get_int('HTTP_TIMEOUT_SECONDS', 20)
MAX_RETRY_ATTEMPTS = config.get_int('MAX_RETRY_ATTEMPTS', 3)
RETRY_BACKOFF_MULTIPLIER = config.get_int('RETRY_BACKOFF_MULTIPLIER', 2)

# Pacing between parks (seconds)
CROWD_IMPORT_DELAY_SECONDS = config.get_float('CROWD_IMPORT_DELAY_SECONDS', 1.0)
PARK_SYNC_DELAY_SECONDS = config.get_float('PARK_SYNC_DELAY_SECONDS', 2.0)

# Park sync window
PARK_SYNC_DEFAULT_DAYS = config.get_int('PARK_SYNC_DEFAULT_DAYS', 7)
PARK_SYNC_MAX_DAYS = config.get_int('PARK_SYNC_MAX_DAYS', 90)

# Crowd import year bounds relative to the current year
CROWD_IMPORT_YEARS_BACK = 10
CROWD_IMPORT_YEARS_AHEAD = 5

# Weather location and housekeeping
WEATHER_LOCATION_ID = config.get('WEATHER_LOCATION_ID', 'walt-disney-world')
WEATHER_LOCATION_NAME = config.get('WEATHER_LOCATION_NAME', 'Walt Disney World')
WEATHER_LOCATION_LATITUDE = config.get_float('WEATHER_LOCATION_LATITUDE', 28.3852)
WEATHER_LOCATION_LONGITUDE = config.get_float('WEATHER_LOCATION_LONGITUDE', -81.5639)
WEATHER_RETENTION_DAYS = config.get_int('WEATHER_RETENTION_DAYS', 2)

# Optional JSON file overriding the default park list
PARKS_FILE = config.get('PARKS_FILE', '')

# Unrecognized upstream status strings map to UNKNOWN instead of OPERATING
STATUS_UNKNOWN_FALLBACK = config.get_bool('STATUS_UNKNOWN_FALLBACK', False)
