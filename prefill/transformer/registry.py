"""Transformer registry."""
import re
from typing import Callable, Dict, List


EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")


class TransformerRegistry:
    """Registry of value cleaners applied to parsed values."""

    def __init__(self):
        """Initialize registry."""
        self.transformers: Dict[str, Callable[[str], str]] = {
            "NONE": lambda x: x,
            "TRIM": lambda x: x.strip(),
            "LOWERCASE": lambda x: x.lower(),
            "UPPERCASE": lambda x: x.upper(),
            "SMART_NAME": self._smart_name,
            "COLLAPSE_SPACES": lambda x: re.sub(r"\s+", " ", x).strip(),
            "REMOVE_SPECIAL": lambda x: re.sub(r"[^\w\s@.+-]", "", x),
            "REMOVE_LEADING_NUMBERS": lambda x: re.sub(r"^\d+\s*", "", x),
            "EXTRACT_EMAIL": self._extract_email,
        }

    @property
    def names(self) -> List[str]:
        return sorted(self.transformers)

    def get(self, name: str) -> Callable[[str], str]:
        """Get transformer by name."""
        try:
            return self.transformers[name.upper()]
        except KeyError:
            raise KeyError(f"Unknown transformer: {name}") from None

    def register(self, name: str, func: Callable[[str], str]) -> None:
        self.transformers[name.upper()] = func

    def transform(self, value: str, transformer_name: str) -> str:
        """Apply transformation."""
        return self.get(transformer_name)(value)

    def transform_all(self, values: List[str], transformer_name: str) -> List[str]:
        """Apply a transformer and drop values it leaves empty."""
        transformer = self.get(transformer_name)
        cleaned = [transformer(value) for value in values]
        return [value for value in cleaned if value.strip()]

    @staticmethod
    def _smart_name(value: str) -> str:
        """Title-case each word."""
        return " ".join(word.capitalize() for word in value.lower().split(" "))

    @staticmethod
    def _extract_email(value: str) -> str:
        match = EMAIL_PATTERN.search(value)
        return match.group(0).lower() if match else ""
