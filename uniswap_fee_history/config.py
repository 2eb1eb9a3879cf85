"""
Configuration settings for the fee history tooling

Loads environment variables and provides client configuration.
"""
import os
from typing import Optional

from dotenv import load_dotenv

from .constants import POSITION_MANAGER_ADDRESS

# Load environment variables from .env file
load_dotenv()


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


class Settings:
    """Application settings"""

    # The Graph API
    GRAPH_API_KEY: str = os.getenv("GRAPH_API_KEY", "")
    CHAIN: str = os.getenv("CHAIN", "ethereum")
    SUBGRAPH_URL: Optional[str] = _optional("SUBGRAPH_URL")
    BLOCKS_SUBGRAPH_URL: Optional[str] = _optional("BLOCKS_SUBGRAPH_URL")

    # On-chain reference calls
    JSON_RPC_URL: Optional[str] = _optional("JSON_RPC_URL")
    POSITION_MANAGER_ADDRESS: str = os.getenv(
        "POSITION_MANAGER_ADDRESS", POSITION_MANAGER_ADDRESS
    )

    # Request Limits
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", 30))
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", 3))

    # Fee history windows
    DEFAULT_NUM_DAYS: int = int(os.getenv("DEFAULT_NUM_DAYS", 30))
    MAX_NUM_DAYS: int = 365

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


# Create global settings instance
settings = Settings()
