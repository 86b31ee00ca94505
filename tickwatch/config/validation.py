"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any

from .defaults import (
    ClassifierParams,
    HistoryParams,
    PollingParams,
    SessionParams,
    SourceParams,
)

DAY_BOUNDARIES = ("calendar_date", "day_of_month")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _unknown_fields(params: dict[str, Any], params_cls: type) -> list[ValidationError]:
    """Keys with no matching field on ``params_cls``."""
    known = {f.name for f in fields(params_cls)}
    return [
        ValidationError(field=str(key), message="Unknown setting", value=value)
        for key, value in params.items()
        if key not in known
    ]


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_history_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate history and window sizes."""
        errors = _unknown_fields(params, HistoryParams)

        for field in ("capacity", "indicator_window", "level_window", "bos_window"):
            if field in params:
                value = params[field]
                if not _is_int(value) or value <= 0:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a positive integer",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_classifier_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate classifier thresholds."""
        errors = _unknown_fields(params, ClassifierParams)

        if "max_volatility" in params:
            value = params["max_volatility"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="max_volatility",
                    message="Must be a positive number",
                    value=value
                ))

        if "min_trend_strength" in params:
            value = params["min_trend_strength"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="min_trend_strength",
                    message="Must be a non-negative number",
                    value=value
                ))

        for field in ("support_proximity_pct", "resistance_proximity_pct"):
            if field in params:
                value = params[field]
                if not _is_number(value) or value < 0 or value >= 1:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a number between 0 (inclusive) and 1",
                        value=value
                    ))

        for field in ("support_multiplier", "resistance_multiplier"):
            if field in params and not _is_number(params[field]):
                errors.append(ValidationError(
                    field=field,
                    message="Must be a number",
                    value=params[field]
                ))

        return errors

    @staticmethod
    def validate_session_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate day boundary and ordering rules."""
        errors = _unknown_fields(params, SessionParams)

        if "day_boundary" in params and params["day_boundary"] not in DAY_BOUNDARIES:
            errors.append(ValidationError(
                field="day_boundary",
                message=f"Must be one of {', '.join(DAY_BOUNDARIES)}",
                value=params["day_boundary"]
            ))

        if "drop_stale_samples" in params and not isinstance(params["drop_stale_samples"], bool):
            errors.append(ValidationError(
                field="drop_stale_samples",
                message="Must be a boolean",
                value=params["drop_stale_samples"]
            ))

        return errors

    @staticmethod
    def validate_polling_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate polling cadence."""
        errors = _unknown_fields(params, PollingParams)

        for field in ("interval_seconds", "history_points"):
            if field in params:
                value = params[field]
                if not _is_int(value) or value <= 0:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a positive integer",
                        value=value
                    ))

        if "align_to_minute" in params and not isinstance(params["align_to_minute"], bool):
            errors.append(ValidationError(
                field="align_to_minute",
                message="Must be a boolean",
                value=params["align_to_minute"]
            ))

        if "history_refill_hour" in params:
            value = params["history_refill_hour"]
            if not _is_int(value) or not 0 <= value <= 23:
                errors.append(ValidationError(
                    field="history_refill_hour",
                    message="Must be an integer between 0 and 23",
                    value=value
                ))

        if "history_refill_minute" in params:
            value = params["history_refill_minute"]
            if not _is_int(value) or not 0 <= value <= 59:
                errors.append(ValidationError(
                    field="history_refill_minute",
                    message="Must be an integer between 0 and 59",
                    value=value
                ))

        if "request_timeout_seconds" in params:
            value = params["request_timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="request_timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_source_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate price source settings."""
        errors = _unknown_fields(params, SourceParams)

        if "currency" in params:
            value = params["currency"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="currency",
                    message="Must be a non-empty string",
                    value=value
                ))

        for field in ("spot_url", "history_url"):
            if field in params:
                value = params[field]
                if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                    errors.append(ValidationError(
                        field=field,
                        message="Must be an http(s) URL template",
                        value=value
                    ))

        if "instrument_id" in params:
            value = params["instrument_id"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="instrument_id",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a merged configuration dictionary section by section."""
        sections = {
            "history": cls.validate_history_params,
            "classifier": cls.validate_classifier_params,
            "session": cls.validate_session_params,
            "polling": cls.validate_polling_params,
            "source": cls.validate_source_params,
        }

        errors = []
        for section, validator in sections.items():
            params = config.get(section, {})
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue
            for error in validator(params):
                errors.append(ValidationError(
                    field=f"{section}.{error.field}",
                    message=error.message,
                    value=error.value
                ))

        return errors
