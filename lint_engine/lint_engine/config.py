"""Linter configuration loaded from a TOML file and environment variables."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lint_engine.rules import RuleKind
from lint_engine.sql_toolkit import Dialect

logger = logging.getLogger(__name__)

CONFIG_TABLE = "sqllint"


class ConfigError(Exception):
    """A configuration file could not be read or holds invalid values."""


class LintSettings(BaseSettings):
    """Linter settings loaded from environment variables with SQLLINT_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="SQLLINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    dialect: Dialect = Dialect.BIGQUERY

    # Layout
    line_delimiter: str = "\n"
    line_limit: int = Field(default=100, gt=0)
    allowed_indent: str = " "
    tab_size: int | None = Field(default=None, gt=0)

    # Style preferences
    single_quote: bool = True
    upper_keyword: bool = True

    # Rules switched off for the whole run; directives cannot re-enable them.
    disabled_rules: list[str] = Field(default_factory=list)

    debug: bool = False

    @field_validator("line_delimiter")
    @classmethod
    def single_character_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("line_delimiter must be exactly one character")
        return v

    @field_validator("allowed_indent")
    @classmethod
    def indent_is_space_or_tab(cls, v: str) -> str:
        if v not in (" ", "\t"):
            raise ValueError("allowed_indent must be a space or a tab")
        return v

    def disabled_rule_kinds(self) -> frozenset[RuleKind]:
        """Resolve ``disabled_rules`` to rule kinds, warning about unknown names."""
        kinds: set[RuleKind] = set()
        for name in self.disabled_rules:
            rule = RuleKind.from_name(name.strip())
            if rule is None:
                logger.warning("Ignoring unknown rule name in disabled_rules: %r", name)
                continue
            kinds.add(rule)
        return frozenset(kinds)


def read_config_file(path: Path) -> dict[str, Any]:
    """Return the settings table of a TOML config file.

    Values are read from a ``[sqllint]`` table when present, otherwise from
    the top level of the file.

    Raises
    ------
    ConfigError
        If the file cannot be opened or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    table = data.get(CONFIG_TABLE, data)
    if not isinstance(table, dict):
        raise ConfigError(f"[{CONFIG_TABLE}] in {path} must be a table")
    return table


def load_settings(config_file: Path | str | None = None, **overrides: object) -> LintSettings:
    """Load settings from environment, an optional TOML file, and overrides.

    Precedence, highest first: *overrides*, the config file, environment
    variables, defaults.
    """
    values: dict[str, Any] = {}
    if config_file is not None:
        values.update(read_config_file(Path(config_file)))
    values.update(overrides)

    try:
        settings = LintSettings(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid linter settings: {exc}") from exc

    if settings.debug:
        logger.info("Loaded settings for dialect: %s", settings.dialect.value)

    return settings
