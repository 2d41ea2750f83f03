"""Configuration classes for Threads parsing.

Every default reproduces the editor's behavior: a leading space is one level
of depth, a leading tab is two, ``//`` starts a comment line and failures are
reported through a red diagnostic block.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ConfigValidationError

DIAGNOSTIC_CLASSES: Tuple[str, ...] = (
    "text-red-500",
    "p-4",
    "border",
    "border-red-300",
    "bg-red-50",
    "rounded",
)

_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_COMPONENTS = ["indent", "classifier", "diagnostics", "global_"]


@dataclass
class IndentConfig:
    """Depth contributed by each kind of leading whitespace character."""

    space_width: int = 1
    tab_width: int = 2

    def __post_init__(self) -> None:
        """Validate indentation configuration."""
        if self.space_width <= 0:
            raise ValueError("space_width must be > 0")
        if self.tab_width <= 0:
            raise ValueError("tab_width must be > 0")


@dataclass
class ClassifierConfig:
    """Configuration for the line classifier."""

    comment_prefix: str = "//"

    def __post_init__(self) -> None:
        """Validate classifier configuration."""
        if not self.comment_prefix or self.comment_prefix.strip() != self.comment_prefix:
            raise ValueError("comment_prefix must be a non-empty token without whitespace")


@dataclass
class DiagnosticConfig:
    """Shape of the node substituted for the forest when parsing fails."""

    error_classes: Tuple[str, ...] = DIAGNOSTIC_CLASSES
    message_prefix: str = "Parser Error"

    def __post_init__(self) -> None:
        """Validate diagnostic configuration."""
        self.error_classes = tuple(self.error_classes)
        if any(not cls for cls in self.error_classes):
            raise ValueError("error_classes cannot contain empty class names")
        if not self.message_prefix:
            raise ValueError("message_prefix cannot be empty")


@dataclass
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"
    enable_performance_metrics: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in _LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {_LOGGING_LEVELS}")


@dataclass(frozen=True)
class ParserConfig:
    """Immutable configuration for all parser components.

    Thread-safe due to frozen dataclass implementation, so one instance can be
    shared by every editor that parses concurrently.
    """

    indent: IndentConfig = field(default_factory=IndentConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    diagnostics: DiagnosticConfig = field(default_factory=DiagnosticConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        try:
            self.indent.__post_init__()
            self.classifier.__post_init__()
            self.diagnostics.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the configuration matching the editor's built-in behavior."""
        return cls(name="default", description="Threads editor defaults")

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig()
            >>> wide_tabs = config.override(indent__tab_width=4)
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, _, field_name = key.rpartition("__")
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for field_name in _COMPONENTS:
                current_config = getattr(self, field_name)
                if field_name in nested_overrides:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
                else:
                    new_fields[field_name] = current_config

            for key, value in nested_overrides.items():
                if key not in _COMPONENTS:
                    new_fields[key] = value

            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, (list, tuple, set)):
                return [_dataclass_to_dict(item) for item in obj]
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files surface
        instead of silently falling back to defaults.
        """
        component_types = {
            "indent": IndentConfig,
            "classifier": ClassifierConfig,
            "diagnostics": DiagnosticConfig,
            "global_": GlobalConfig,
        }
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )

        values: Dict[str, Any] = {}
        try:
            for key, value in data.items():
                target = component_types.get(key)
                if target is not None and isinstance(value, dict):
                    values[key] = target(**value)
                else:
                    values[key] = value
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    def validate_compatibility(self, other: "ParserConfig") -> List[str]:
        """List the settings that would make two configurations parse differently."""
        warnings = []

        if self.version != other.version:
            warnings.append(f"Version mismatch: {self.version} vs {other.version}")
        if self.indent != other.indent:
            warnings.append("Indentation widths differ - nesting may change")
        if self.classifier.comment_prefix != other.classifier.comment_prefix:
            warnings.append("Comment prefixes differ - different lines will be skipped")

        return warnings
