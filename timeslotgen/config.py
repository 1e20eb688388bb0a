"""
Schedule file management using Pydantic models loaded from YAML.
"""

from __future__ import annotations

import dataclasses
import math
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pytz
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .domain.civil_time import CivilTimeResolver, Zone
from .domain.exceptions import ValidationError
from .domain.models import Alignment, GenerationConfig, LabelFormatter, RangeInput, TimeBoundary, TimeRange

DEFAULT_CONFIG_FILENAME = "timeslots.yaml"


def _yaml_scalar_to_text(value: Any) -> Any:
    """YAML turns unquoted dates and datetimes into objects; keep them as civil text."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


class BoundarySettings(BaseModel):
    """A time of day with an optional date."""
    model_config = ConfigDict(extra="forbid")

    time: Union[str, Dict[str, int]]
    date: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> Any:
        return _yaml_scalar_to_text(value)


BoundaryValue = Union[datetime, str, BoundarySettings]


class RangeSettings(BaseModel):
    """Start and end boundaries of a range."""
    model_config = ConfigDict(extra="forbid")

    start: BoundaryValue
    end: BoundaryValue

    @field_validator("start", "end", mode="before")
    @classmethod
    def normalize_boundary(cls, value: Any) -> Any:
        """Reject bare numbers, which YAML produces for unquoted times like 9:00."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            raise ValueError(f"Boundary must be a string or mapping, got number {value!r}; quote times like \"09:00\"")
        return _yaml_scalar_to_text(value)

    def to_range_input(self) -> RangeInput:
        return RangeInput(start=_boundary_input(self.start), end=_boundary_input(self.end))


def _boundary_input(value: BoundaryValue) -> Any:
    if isinstance(value, BoundarySettings):
        return TimeBoundary(time=value.time, date=value.date)
    return value


class ScheduleSettings(BaseModel):
    """Declarative schedule description as stored in a YAML file."""
    model_config = ConfigDict(extra="forbid")

    range: RangeSettings
    slot_duration_minutes: float
    slot_interval_minutes: Optional[float] = None
    buffer_before_minutes: float = 0
    buffer_after_minutes: float = 0
    minimum_slot_duration_minutes: Optional[float] = None
    excluded_windows: List[RangeSettings] = Field(default_factory=list)
    timezone: Optional[str] = None
    day: Optional[str] = None
    max_slots: Optional[int] = None
    include_edge: bool = True
    alignment: Alignment = Alignment.START
    label_format: Optional[str] = None

    @field_validator("slot_duration_minutes", "slot_interval_minutes", "minimum_slot_duration_minutes")
    @classmethod
    def validate_positive(cls, value: Optional[float]) -> Optional[float]:
        """Ensure durations are positive and finite."""
        if value is not None and (not math.isfinite(value) or value <= 0):
            raise ValueError(f"must be a positive number, got {value}")
        return value

    @field_validator("buffer_before_minutes", "buffer_after_minutes")
    @classmethod
    def validate_buffer(cls, value: float) -> float:
        """Ensure buffers are not negative."""
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"cannot be negative, got {value}")
        return value

    @field_validator("max_slots")
    @classmethod
    def validate_max_slots(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("must be greater than zero when provided")
        return value

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, value: Any) -> Any:
        return _yaml_scalar_to_text(value)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        """Ensure the timezone exists in the zone database."""
        if value is None:
            return value
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"unknown timezone {value!r}") from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "ScheduleSettings":
        """
        Load a schedule description from a YAML file.

        Args:
            config_path: Path to the YAML schedule file

        Returns:
            ScheduleSettings instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValidationError: If the file is not valid YAML or not a valid schedule
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Schedule file not found: {config_path}\n"
                f"Please create a {DEFAULT_CONFIG_FILENAME} file. See examples/timeslots.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValidationError(f"Invalid YAML in {config_path}: {exc}", value=str(config_path)) from exc

        if not isinstance(data, dict):
            raise ValidationError(
                f"Schedule file {config_path} must contain a mapping at the root level.",
                value=str(config_path),
            )

        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid schedule file {config_path}:\n{exc}", value=str(config_path)) from exc

    def build_label_formatter(self) -> Optional[LabelFormatter]:
        """Create a label formatter rendering ``start - end`` with the strftime pattern ``label_format``."""
        if not self.label_format:
            return None

        fmt = self.label_format
        zone = CivilTimeResolver().tzinfo(Zone.from_optional(self.timezone))

        def format_label(slot: TimeRange, index: int, duration_minutes: float) -> str:
            start = slot.start.astimezone(zone).strftime(fmt)
            end = slot.end.astimezone(zone).strftime(fmt)
            return f"{start} - {end}"

        return format_label

    def to_generation_config(
        self,
        *,
        day: Optional[str] = None,
        timezone: Optional[str] = None,
    ) -> GenerationConfig:
        """
        Build the domain config, optionally overriding day and timezone.
        """
        settings = self
        if timezone is not None:
            settings = self.model_copy(update={"timezone": timezone})

        return GenerationConfig(
            range=settings.range.to_range_input(),
            slot_duration_minutes=settings.slot_duration_minutes,
            slot_interval_minutes=settings.slot_interval_minutes,
            buffer_before_minutes=settings.buffer_before_minutes,
            buffer_after_minutes=settings.buffer_after_minutes,
            excluded_windows=[window.to_range_input() for window in settings.excluded_windows],
            timezone=settings.timezone,
            day=day if day is not None else settings.day,
            minimum_slot_duration_minutes=settings.minimum_slot_duration_minutes,
            max_slots=settings.max_slots,
            include_edge=settings.include_edge,
            alignment=settings.alignment,
            label_formatter=settings.build_label_formatter(),
        )

    def to_daily_config(self, *, timezone: Optional[str] = None) -> GenerationConfig:
        """Build the per-day config for the daily driver, which assigns ``day`` itself."""
        return dataclasses.replace(self.to_generation_config(timezone=timezone), day=None)


def get_default_config_path() -> Path:
    """Get the default schedule file path."""
    # Look for timeslots.yaml in current directory
    return Path.cwd() / DEFAULT_CONFIG_FILENAME
