"""Configuration management for the workerplan application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

DEFAULT_KDM_DATA_URL = "https://releases.rancher.com/kontainer-driver-metadata/release-v2.8/data.json"


class Config:
    """Application configuration with sensible defaults."""

    # Kubernetes driver metadata, source of per-version service options
    KDM_DATA_URL: str = os.getenv("KDM_DATA_URL", DEFAULT_KDM_DATA_URL)
    KDM_CACHE_TTL: int = int(os.getenv("KDM_CACHE_TTL", "3600"))

    # Management cluster access
    KUBECONFIG: str = os.getenv("KUBECONFIG", "")

    # API
    API_KEY: str = os.getenv("WORKERPLAN_API_KEY", "")
    API_HOST: str = os.getenv("WORKERPLAN_API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("WORKERPLAN_API_PORT", "8080"))

    # Timeouts (in seconds)
    API_TIMEOUT: int = int(os.getenv("API_TIMEOUT", "30"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Security
    REDACT_KEYS: tuple = ("api_key", "password", "secret", "token")

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        required = {
            "WORKERPLAN_API_KEY": cls.API_KEY,
            "KDM_DATA_URL": cls.KDM_DATA_URL,
        }
        missing = [k for k, v in required.items() if not v]
        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

# Don't validate on import to allow for dynamic configuration
# Call Config.validate() explicitly when needed
