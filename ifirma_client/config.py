"""Application configuration."""
import os
from dataclasses import dataclass


@dataclass
class IfirmaApiConfig:
    """ifirma API configuration."""

    username: str = ""
    invoices_key: str = ""  # Hex "faktura" key from the ifirma panel
    key_name: str = "faktura"
    base_url: str = "https://www.ifirma.pl/"
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "IfirmaApiConfig":
        """Load config from environment variables."""
        return cls(
            username=os.getenv("IFIRMA_USERNAME", ""),
            invoices_key=os.getenv("IFIRMA_INVOICES_KEY", ""),
            key_name=os.getenv("IFIRMA_KEY_NAME", "faktura"),
            base_url=os.getenv("IFIRMA_BASE_URL", "https://www.ifirma.pl/"),
            timeout=int(os.getenv("IFIRMA_TIMEOUT", "30")),
        )


@dataclass
class AppConfig:
    """Application configuration."""

    output_dir: str = "./output"
    mapping_file: str = ""  # Optional JSON mapping tables
    ifirma_api: IfirmaApiConfig = None

    def __post_init__(self):
        """Initialize default values."""
        if self.ifirma_api is None:
            self.ifirma_api = IfirmaApiConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            output_dir=os.getenv("IFIRMA_OUTPUT_DIR", "./output"),
            mapping_file=os.getenv("IFIRMA_MAPPING_FILE", ""),
            ifirma_api=IfirmaApiConfig.from_env(),
        )


# Global instance
app_config = AppConfig.from_env()
