"""
Analysis options.

Options are read from an optional YAML config file, environment variables
(optionally loaded from a .env file by the CLI) and explicit overrides, in
increasing order of priority.

Example config file:

    language: cpp
    base-code: template
    subdirectory: src
    excluded-files: [test_main.cpp]
    max-comparisons: 250
"""
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .language import DEFAULT_LANGUAGE, LanguageFrontend, get_language

# Value of max-comparisons that keeps every comparison in the report
SHOW_ALL_COMPARISONS = 0
DEFAULT_MAXIMUM_COMPARISONS = 100
DEFAULT_RESULT_PATH = Path("result")

# Environment variables providing defaults for unset options
ENV_LANGUAGE = "LABPLAG_LANGUAGE"
ENV_MAXIMUM_COMPARISONS = "LABPLAG_MAX_COMPARISONS"


class AnalysisOptions(BaseModel):
    """Configuration bundle shared by discovery and report assembly."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    language: str = DEFAULT_LANGUAGE
    submission_directories: list[Path] = Field(default_factory=list, alias="submission-directories")
    old_submission_directories: list[Path] = Field(default_factory=list, alias="old-submission-directories")
    base_code: str | None = Field(default=None, alias="base-code")
    subdirectory_name: str | None = Field(default=None, alias="subdirectory")
    file_suffixes: list[str] | None = Field(default=None, alias="suffixes")
    excluded_files: list[str] = Field(default_factory=list, alias="excluded-files")
    maximum_comparisons: int = Field(default=DEFAULT_MAXIMUM_COMPARISONS, ge=0, alias="max-comparisons")
    minimum_token_match: int | None = Field(default=None, ge=1, alias="min-token-match")
    result_path: Path = Field(default=DEFAULT_RESULT_PATH, alias="result-file")

    @field_validator("language")
    @classmethod
    def _known_language(cls, value: str) -> str:
        return get_language(value).identifier

    @field_validator("base_code", "subdirectory_name")
    @classmethod
    def _blank_as_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def frontend(self) -> LanguageFrontend:
        return get_language(self.language)

    @property
    def has_base_code(self) -> bool:
        return self.base_code is not None

    @property
    def valid_suffixes(self) -> list[str]:
        """Configured suffixes, falling back to the language defaults."""
        if self.file_suffixes is not None:
            return list(self.file_suffixes)
        return list(self.frontend.suffixes)

    @property
    def match_sensitivity(self) -> int:
        """Minimum token match, falling back to the language default."""
        if self.minimum_token_match is not None:
            return self.minimum_token_match
        return self.frontend.minimum_token_match


# YAML uses hyphenated keys, overrides use field names
_FIELD_BY_ALIAS = {
    field.alias: name
    for name, field in AnalysisOptions.model_fields.items()
    if field.alias
}


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    normalized = {}
    for key, value in data.items():
        key = str(key)
        normalized[_FIELD_BY_ALIAS.get(key, key.replace("-", "_"))] = value
    return normalized


def _environment_defaults() -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    language = os.getenv(ENV_LANGUAGE)
    if language:
        defaults["language"] = language
    max_comparisons = os.getenv(ENV_MAXIMUM_COMPARISONS)
    if max_comparisons:
        defaults["maximum_comparisons"] = max_comparisons
    return defaults


def load_config_file(config_file: str | Path) -> dict[str, Any]:
    """
    Load option values from a YAML file.

    The file holds a mapping of options, either at top level or below an
    "analysis" key.

    Args:
        config_file: Path to the YAML file

    Returns:
        Option values keyed by field name

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid YAML or does not contain a mapping
    """
    path = Path(config_file)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config structure in {path}: expected a mapping")

    section = data.get("analysis", data)
    if not isinstance(section, dict):
        raise ValueError(f"Invalid 'analysis' section in {path}: expected a mapping")
    return _normalize_keys(section)


def load_options(config_file: str | Path | None = None, **overrides: Any) -> AnalysisOptions:
    """
    Build AnalysisOptions from environment, config file and overrides.

    Overrides whose value is None are ignored, so CLI arguments that were
    not given do not mask config file values.
    """
    data = _environment_defaults()
    if config_file is not None:
        data.update(load_config_file(config_file))
    data.update(_normalize_keys({k: v for k, v in overrides.items() if v is not None}))
    return AnalysisOptions.model_validate(data)


def read_exclusion_file(path: str | Path) -> list[str]:
    """
    Read excluded file names from a text file, one name per line.

    Blank lines are skipped and duplicates dropped, keeping the first
    occurrence.
    """
    with open(path, "r", encoding="utf-8") as f:
        names = [line.strip() for line in f]
    return list(dict.fromkeys(name for name in names if name))
