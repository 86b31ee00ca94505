"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .defaults import DefaultConfig, get_default_config


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    @property
    def tickers_file(self) -> Path:
        return self.config_dir / "tickers.yaml"

    def _load_tickers_section(self) -> dict[str, Any]:
        if not self.tickers_file.exists():
            return {}

        with open(self.tickers_file) as f:
            tickers_config = yaml.safe_load(f) or {}

        tickers = tickers_config.get("tickers", {}) or {}
        return {str(symbol).upper(): overrides for symbol, overrides in tickers.items()}

    def load_ticker_config(self, symbol: str) -> dict[str, Any]:
        """Load symbol-specific configuration overrides."""
        return self._load_tickers_section().get(symbol.upper(), {}) or {}  # type: ignore[no-any-return]

    def list_symbols(self) -> list[str]:
        """Symbols declared in the tickers file, in file order."""
        return list(self._load_tickers_section())

    def merge_config(
        self,
        symbol: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Symbol-specific overrides from tickers.yaml
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        ticker_config = self.load_ticker_config(symbol)
        config = self._deep_merge(config, ticker_config)

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
