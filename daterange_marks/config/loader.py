"""Option loader with layered precedence."""

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import structlog
import yaml

from ..errors import ValidationError
from .defaults import (
    STYLE_MAP_FIELDS,
    PluginOptions,
    canonical_option_keys,
    get_default_options,
)
from .presets import get_preset
from .validation import OptionsValidator

logger = structlog.get_logger(__name__)

OPTIONS_FILE = "plugin.yaml"


@dataclass(frozen=True)
class OptionsLoader:
    """Builds plugin options from defaults, presets, YAML and overrides."""

    config_dir: Path
    defaults: PluginOptions

    @classmethod
    def create(cls, config_dir: Optional[Union[str, Path]] = None) -> "OptionsLoader":
        """Create an OptionsLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_options(),
        )

    def load_options_file(self, filename: str = OPTIONS_FILE) -> dict[str, Any]:
        """Load option overrides from a YAML file in the config directory."""
        options_file = self.config_dir / filename

        if not options_file.exists():
            return {}

        with open(options_file) as f:
            content = yaml.safe_load(f) or {}

        if not isinstance(content, dict):
            raise ValidationError(
                f"Options file {options_file} must contain a mapping",
                field="options_file",
                value=str(options_file),
            )

        return canonical_option_keys(content.get("options", content))

    def merge_options(
        self,
        preset: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None,
        options_file: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Merge options with layered precedence.

        Priority order:
        1. Caller overrides (highest priority)
        2. YAML options file
        3. Named preset
        4. Built-in defaults (lowest priority)
        """
        options = self.defaults.to_dict()

        if preset:
            options = self._merge(options, get_preset(preset))

        if options_file:
            options = self._merge(options, self.load_options_file(options_file))

        if overrides:
            options = self._merge(options, canonical_option_keys(overrides))

        return options

    def build(
        self,
        preset: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None,
        options_file: Optional[str] = None,
    ) -> PluginOptions:
        """
        Merge and validate options into a ``PluginOptions`` instance.

        Raises:
            ValidationError: If any merged option is invalid
        """
        merged = self.merge_options(preset, overrides, options_file)
        return self.to_options(merged)

    def apply(self, current: PluginOptions, overrides: dict[str, Any]) -> PluginOptions:
        """Merge overrides into an existing option set."""
        merged = self._merge(current.to_dict(), canonical_option_keys(overrides))
        return self.to_options(merged)

    def to_options(self, merged: dict[str, Any]) -> PluginOptions:
        known = {f.name for f in dataclasses.fields(PluginOptions)}
        unknown = sorted(set(merged) - known)
        if unknown:
            logger.warning("Ignoring unknown plugin options", options=unknown)

        fields = {key: value for key, value in merged.items() if key in known}
        issues = OptionsValidator.validate_options(fields)
        if issues:
            messages = [f"{issue.field}: {issue.message} (got: {issue.value!r})" for issue in issues]
            raise ValidationError(
                "Invalid plugin options",
                field=issues[0].field,
                value=issues[0].value,
                context={"issues": messages},
            )

        if "ranges" in fields:
            fields["ranges"] = tuple(fields["ranges"] or ())
        return PluginOptions(**fields)

    def _merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Shallow merge with deep merge of style maps."""
        result = base.copy()

        for key, value in override.items():
            if key in STYLE_MAP_FIELDS and isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = {**result[key], **value}
            else:
                result[key] = value

        return result
