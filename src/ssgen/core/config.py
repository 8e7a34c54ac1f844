"""Build options and config-file parsing

Options come from the command line, optionally layered over a YAML file
whose keys match the field names:

    input: site/
    output: public/
    jobs: 8
    fail_fast: false
    allow_shell: [git, date]
    shell_timeout: 10
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ssgen.exceptions import ConfigError


class BuildOptions(BaseModel):
    """Program-wide, read-only settings for one build."""

    model_config = {"frozen": True}

    input: Path = Field(description="Input directory for page files")
    output: Path = Field(default=Path("./"), description="Output directory for generated HTML")
    jobs: int | None = Field(
        default=None, ge=1, description="Maximum concurrent pages (default: one per page)"
    )
    fail_fast: bool = Field(
        default=False, description="Abort the build on the first page that fails"
    )
    allow_shell: list[str] = Field(
        default_factory=list, description="Programs !SHELL_CMD may run"
    )
    shell_timeout: float = Field(default=10.0, gt=0, description="Seconds per !SHELL_CMD")
    page_suffix: str = Field(default=".page", description="Suffix of page files")
    meta_file: str = Field(default="META.yaml", description="Site-wide variables file")

    @field_validator("page_suffix")
    @classmethod
    def normalize_suffix(cls, value: str) -> str:
        value = value.lower()
        return value if value.startswith(".") else f".{value}"

    @model_validator(mode="after")
    def canonicalize_roots(self) -> "BuildOptions":
        """Canonicalise both roots and make sure they differ."""
        input_root = self.input.expanduser()
        if not input_root.is_dir():
            raise ValueError(f"Input directory does not exist: {self.input}")
        input_root = input_root.resolve()
        output_root = self.output.expanduser().resolve()

        if input_root == output_root:
            raise ValueError("Output directory is the same as Input directory!")

        # frozen model: bypass __setattr__ for the normalised paths
        object.__setattr__(self, "input", input_root)
        object.__setattr__(self, "output", output_root)
        return self

    @classmethod
    def create(cls, **values: Any) -> "BuildOptions":
        """Validate ``values``, raising ConfigError instead of ValidationError."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigError(_format_validation(exc)) from exc

    @classmethod
    def load(cls, path: Path | None = None, **overrides: Any) -> "BuildOptions":
        """Load options from a YAML file, then apply non-None ``overrides``."""
        data: dict[str, Any] = {}
        if path is not None:
            data = load_config_yaml(path)
            # relative roots in the file are relative to the file
            for key in ("input", "output"):
                if key in data and data[key] is not None:
                    root = Path(str(data[key])).expanduser()
                    data[key] = root if root.is_absolute() else path.parent / root

        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.create(**data)


def load_config_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML config file into a mapping."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _format_validation(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"]
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)
