"""Configuration and environment handling for the unified API client."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://api.picaos.com/v1"


class Config:
    """Central configuration object."""

    def __init__(self):
        # Load .env file if it exists
        env_path = Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        # Credentials
        self.secret: Optional[str] = os.getenv("PICA_SECRET")

        # Endpoint
        self.base_url: str = os.getenv("PICA_BASE_URL", DEFAULT_BASE_URL)

        # Timeouts (seconds)
        self.connect_timeout: float = float(os.getenv("PICA_CONNECT_TIMEOUT", "10.0"))
        self.read_timeout: float = float(os.getenv("PICA_READ_TIMEOUT", "30.0"))

        # Logging
        self.log_level: str = os.getenv("PICA_LOG_LEVEL", "WARNING")

    def __repr__(self) -> str:
        return f"Config(base_url={self.base_url!r}, secret_set={self.secret is not None})"


# Global config instance
config = Config()
