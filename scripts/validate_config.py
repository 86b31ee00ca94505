#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tickwatch.config.loader import ConfigLoader
from tickwatch.config.validation import ConfigValidator, ValidationError


def validate_ticker_config(loader: ConfigLoader, symbol: str) -> List[ValidationError]:
    """Validate merged configuration for a specific symbol."""
    config = loader.merge_config(symbol)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    print("Validating tickwatch configuration...")

    loader = ConfigLoader.create()

    # Configured symbols plus one that only uses defaults
    symbols = loader.list_symbols() + ["UNKNOWN-SYMBOL"]

    all_valid = True

    for symbol in symbols:
        print(f"\nValidating {symbol}...")

        try:
            errors = validate_ticker_config(loader, symbol)

            if errors:
                print(f"  Found {len(errors)} validation errors:")
                for error in errors:
                    print(f"  - {error.field}: {error.message} (value: {error.value})")
                all_valid = False
            else:
                print(f"  {symbol} configuration is valid")

        except Exception as e:
            print(f"  Error validating {symbol}: {e}")
            all_valid = False

    if all_valid:
        print("\nAll configuration validation passed")
        sys.exit(0)
    else:
        print("\nConfiguration validation failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
