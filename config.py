"""Application configuration."""
import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LettersApiConfig:
    """Letters API configuration."""

    base_url: str = "https://letters.gov.sg/api/v1"
    api_key: str = ""  # Read from env or user input
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "LettersApiConfig":
        """Load config from environment variables."""
        return cls(
            base_url=os.getenv("LETTERS_API_URL", "https://letters.gov.sg/api/v1"),
            api_key=os.getenv("LETTERS_API_KEY", ""),
            timeout=int(os.getenv("LETTERS_API_TIMEOUT", "30")),
        )


@dataclass
class GenerationConfig:
    """Link and letter generation settings."""

    values_delimiter: str = ","
    strict_lengths: bool = False
    output_dir: str = "./output"

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        """Load config from environment variables."""
        return cls(
            values_delimiter=os.getenv("PREFILL_VALUES_DELIMITER", ","),
            strict_lengths=_env_flag("PREFILL_STRICT_LENGTHS"),
            output_dir=os.getenv("PREFILL_OUTPUT_DIR", "./output"),
        )


@dataclass
class AppConfig:
    """Application configuration."""

    letters_api: LettersApiConfig = None
    generation: GenerationConfig = None

    def __post_init__(self):
        """Fill in defaults."""
        if self.letters_api is None:
            self.letters_api = LettersApiConfig.from_env()
        if self.generation is None:
            self.generation = GenerationConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            letters_api=LettersApiConfig.from_env(),
            generation=GenerationConfig.from_env(),
        )


# Global instance
app_config = AppConfig()
