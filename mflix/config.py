"""
Configuration management for the mflix data-access layer.
"""
import os
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Configuration class for the mflix data-access layer."""

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'development')

        # MongoDB Configuration
        self.mflix_db_uri = os.getenv('MFLIX_DB_URI', 'mongodb://localhost:27017')
        self.mflix_ns = os.getenv('MFLIX_NS', 'sample_mflix')

        # Connection pool and write concern, fixed once at startup
        self.pool_size = int(os.getenv('MFLIX_POOL_SIZE', '50'))
        self.wtimeout_ms = int(os.getenv('MFLIX_WTIMEOUT_MS', '2500'))
        self.write_concern = os.getenv('MFLIX_WRITE_CONCERN', 'majority')
        self.server_selection_timeout_ms = int(
            os.getenv('MFLIX_SERVER_SELECTION_TIMEOUT_MS', '5000')
        )

        # Logging Configuration
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    def validate(self) -> bool:
        """Validate that all required configuration is present."""
        required_configs = [
            ('MFLIX_DB_URI', self.mflix_db_uri),
            ('MFLIX_NS', self.mflix_ns),
        ]

        missing_configs = []
        for name, value in required_configs:
            if not value:
                missing_configs.append(name)

        if missing_configs:
            raise ValueError(f"Missing required configuration: {', '.join(missing_configs)}")

        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary (connection URI omitted)."""
        return {
            'environment': self.environment,
            'mflix_ns': self.mflix_ns,
            'pool_size': self.pool_size,
            'wtimeout_ms': self.wtimeout_ms,
            'write_concern': self.write_concern,
            'server_selection_timeout_ms': self.server_selection_timeout_ms,
            'log_level': self.log_level
        }


# Global configuration instance
config = Config()
