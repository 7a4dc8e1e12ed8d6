#!/usr/bin/env python3
# src/ribbonkit/config.py

"""
Settings for the analyzer and the ribbon generator.

Settings are plain dataclasses. ``load_settings`` reads them from a JSON file
shaped like ``{"analyzer": {...}, "ribbon": {...}}``; any key left out keeps
its default, and ribbon defaults follow the chosen representation mode.
"""

import json
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from .domain.constants import UNIFORM_COLOR
from .domain.errors import ConfigurationError
from .domain.models.profile import ProfileKind


class RepresentationMode(Enum):
    CARTOON = "cartoon"
    RIBBON = "ribbon"
    TRACE = "trace"


class ColorScheme(Enum):
    SECONDARY = "secondary"
    CHAIN = "chain"
    RAINBOW = "rainbow"
    UNIFORM = "uniform"


class Interpolation(Enum):
    BSPLINE = "bspline"
    CATMULL_ROM = "catmull_rom"


def _coerce_enum(enum_cls, value, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(f"Invalid {name} {value!r}; expected one of: {choices}") from None


@dataclass
class AnalyzerSettings:
    """Thresholds for geometric secondary structure assignment and smoothing."""

    window_size: int = 5
    min_ca_atoms: int = 3
    helix_min_length: int = 4
    sheet_min_length: int = 3
    max_gap_length: int = 2
    min_confidence: float = 0.5
    min_score: float = 0.6
    use_geometry: bool = True

    def validate(self) -> None:
        if self.window_size < 3:
            raise ConfigurationError(f"window_size must be at least 3, got {self.window_size}")
        if not 3 <= self.min_ca_atoms <= self.window_size:
            raise ConfigurationError(
                f"min_ca_atoms must lie in [3, window_size], got {self.min_ca_atoms}"
            )
        if self.helix_min_length < 1 or self.sheet_min_length < 1:
            raise ConfigurationError("Minimum run lengths must be positive")
        if self.max_gap_length < 0:
            raise ConfigurationError(f"max_gap_length must be >= 0, got {self.max_gap_length}")
        for name in ("min_confidence", "min_score"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must lie in [0, 1], got {value}")


# Per-mode defaults applied by RibbonSettings.for_mode
_MODE_DEFAULTS: Dict[RepresentationMode, Dict[str, Any]] = {
    RepresentationMode.CARTOON: {
        "samples_per_residue": 20,
        "helix_radius": 1.8,
        "helix_sides": 12,
        "sheet_width": 2.5,
        "sheet_thickness": 0.3,
        "sheet_arrows": True,
        "coil_profile": ProfileKind.CIRCLE,
        "coil_radius": 0.8,
        "coil_sides": 8,
    },
    RepresentationMode.RIBBON: {
        "samples_per_residue": 8,
        "helix_radius": 1.2,
        "helix_sides": 12,
        "sheet_width": 2.5,
        "sheet_thickness": 0.3,
        "sheet_arrows": False,
        "coil_profile": ProfileKind.RECTANGLE,
        "coil_width": 0.8,
        "coil_thickness": 0.2,
    },
    RepresentationMode.TRACE: {
        "sheet_arrows": False,
    },
}


@dataclass
class RibbonSettings:
    """Shape, sampling and coloring of the generated mesh."""

    representation: RepresentationMode = RepresentationMode.CARTOON
    samples_per_residue: int = 20
    helix_radius: float = 1.8
    helix_sides: int = 12
    sheet_width: float = 2.5
    sheet_thickness: float = 0.3
    coil_profile: ProfileKind = ProfileKind.CIRCLE
    coil_radius: float = 0.8
    coil_sides: int = 8
    coil_width: float = 0.8
    coil_thickness: float = 0.2
    blend_factor: float = 0.3
    blend_window: int = 2
    sheet_arrows: bool = True
    arrow_scale: float = 1.5
    tension: float = 0.3
    arc_length_subdivisions: int = 100
    interpolation: Interpolation = Interpolation.BSPLINE
    color_scheme: ColorScheme = ColorScheme.SECONDARY
    uniform_color: Tuple[float, float, float] = UNIFORM_COLOR
    alpha: float = 1.0

    def __post_init__(self):
        self.representation = _coerce_enum(RepresentationMode, self.representation, "representation")
        self.coil_profile = _coerce_enum(ProfileKind, self.coil_profile, "coil_profile")
        self.interpolation = _coerce_enum(Interpolation, self.interpolation, "interpolation")
        self.color_scheme = _coerce_enum(ColorScheme, self.color_scheme, "color_scheme")
        self.uniform_color = tuple(float(c) for c in self.uniform_color)

    @classmethod
    def for_mode(cls, mode: Union[str, RepresentationMode] = "cartoon", **overrides) -> "RibbonSettings":
        """
        Settings with the defaults of a representation mode.

        Args:
            mode: cartoon, ribbon or trace
            **overrides: Field values that replace the mode defaults

        Returns:
            Validated RibbonSettings
        """
        mode = _coerce_enum(RepresentationMode, mode, "representation")
        values = dict(_MODE_DEFAULTS[mode])
        values.update(overrides)
        values["representation"] = mode
        unknown = set(values) - {f.name for f in fields(cls)}
        if unknown:
            raise ConfigurationError(f"Unknown ribbon settings: {', '.join(sorted(unknown))}")
        settings = cls(**values)
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.samples_per_residue < 1:
            raise ConfigurationError(
                f"samples_per_residue must be >= 1, got {self.samples_per_residue}"
            )
        if self.helix_sides < 3 or self.coil_sides < 3:
            raise ConfigurationError("Circular profiles need at least 3 sides")
        for name in (
            "helix_radius",
            "sheet_width",
            "sheet_thickness",
            "coil_radius",
            "coil_width",
            "coil_thickness",
        ):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")
        if self.coil_profile is ProfileKind.BLEND:
            raise ConfigurationError("coil_profile must be circle or rectangle")
        if not 0.0 <= self.blend_factor <= 1.0:
            raise ConfigurationError(f"blend_factor must lie in [0, 1], got {self.blend_factor}")
        if self.blend_window < 0:
            raise ConfigurationError(f"blend_window must be >= 0, got {self.blend_window}")
        if self.arrow_scale < 1.0:
            raise ConfigurationError(f"arrow_scale must be >= 1, got {self.arrow_scale}")
        if self.tension < 0:
            raise ConfigurationError(f"tension must be >= 0, got {self.tension}")
        if self.arc_length_subdivisions < 1:
            raise ConfigurationError("arc_length_subdivisions must be >= 1")
        if len(self.uniform_color) != 3 or not all(0.0 <= c <= 1.0 for c in self.uniform_color):
            raise ConfigurationError("uniform_color must be an RGB triple in [0, 1]")
        if not 0.0 <= self.alpha <= 1.0:
            raise ConfigurationError(f"alpha must lie in [0, 1], got {self.alpha}")

    def customized(self) -> Dict[str, Any]:
        """Fields whose values differ from the defaults of this representation mode."""
        defaults = RibbonSettings.for_mode(self.representation)
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "representation" and getattr(self, f.name) != getattr(defaults, f.name)
        }

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.value
        data["uniform_color"] = list(self.uniform_color)
        return data


@dataclass
class PipelineSettings:
    """Analyzer and ribbon settings used together by the cartoon service."""

    analyzer: AnalyzerSettings = field(default_factory=AnalyzerSettings)
    ribbon: RibbonSettings = field(default_factory=RibbonSettings)

    def validate(self) -> None:
        self.analyzer.validate()
        self.ribbon.validate()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineSettings":
        if not isinstance(data, dict):
            raise ConfigurationError("Settings must be a JSON object")
        unknown = set(data) - {"analyzer", "ribbon"}
        if unknown:
            raise ConfigurationError(f"Unknown settings sections: {', '.join(sorted(unknown))}")

        analyzer_data = dict(data.get("analyzer") or {})
        analyzer_fields = {f.name for f in fields(AnalyzerSettings)}
        unknown = set(analyzer_data) - analyzer_fields
        if unknown:
            raise ConfigurationError(f"Unknown analyzer settings: {', '.join(sorted(unknown))}")

        ribbon_data = dict(data.get("ribbon") or {})
        mode = ribbon_data.pop("representation", RepresentationMode.CARTOON)
        try:
            analyzer = AnalyzerSettings(**analyzer_data)
            ribbon = RibbonSettings.for_mode(mode, **ribbon_data)
        except TypeError as e:
            raise ConfigurationError(str(e)) from e

        settings = cls(analyzer=analyzer, ribbon=ribbon)
        settings.validate()
        return settings

    def with_overrides(self, **ribbon_overrides) -> "PipelineSettings":
        """
        Copy with some ribbon fields replaced.

        A new representation switches to that mode's defaults, except for fields
        that had been customized away from the old mode's defaults; those carry over.
        """
        if "representation" in ribbon_overrides:
            mode = ribbon_overrides.pop("representation")
            values = self.ribbon.customized()
            values.update(ribbon_overrides)
            ribbon = RibbonSettings.for_mode(mode, **values)
        else:
            ribbon = replace(self.ribbon, **ribbon_overrides)
        ribbon.validate()
        return PipelineSettings(analyzer=self.analyzer, ribbon=ribbon)


def load_settings(path: Union[str, Path]) -> PipelineSettings:
    """
    Read pipeline settings from a JSON file.

    Raises:
        ConfigurationError: If the file is missing, is not valid JSON or holds invalid values
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Settings file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    return PipelineSettings.from_dict(data)
