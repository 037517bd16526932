"""
Layered settings for the energy readiness toolkit.

Layers, lowest precedence first:
  1. ``config/default.toml``   committed defaults
  2. ``config/local.toml``     per-machine overrides next to the base file
  3. ``.env``                  exported into the process environment
  4. ``ENERGY_READINESS_*``    environment variables (see ``ENV_OVERRIDES``)

``load_config()`` returns a frozen ``AppConfig``. Only the CLI reads
settings; scoring, simulation and selection receive plain values.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from energy_readiness.models.scenario import ScenarioParameters

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUTHY = frozenset({"1", "true", "yes", "on"})

# env var → (section, key); section None means a top-level key
ENV_OVERRIDES: dict[str, tuple[Optional[str], str]] = {
    "ENERGY_READINESS_DB_PATH":   ("database", "db_path"),
    "ENERGY_READINESS_LOG_LEVEL": ("logging", "level"),
    "ENERGY_READINESS_DEBUG":     (None, "debug"),
}


class DatabaseConfig(BaseModel):
    """Where the readiness-score slot lives."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/db/energy_readiness.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class DataConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_file: str = "data/raw/consumption.csv"
    output_dir: str = "data/outputs"


class ScenarioConfig(BaseModel):
    """Default tariff, system cost and emission factor.

    These seed the ``--rate`` / ``--cost`` / ``--co2`` CLI options; a run can
    override any of them.
    """

    model_config = ConfigDict(frozen=True)

    rate_per_kwh: float = 12.0
    system_cost: float = 1_500_000.0
    co2_factor_kg_per_kwh: float = 0.7
    currency: str = "PHP"

    def to_parameters(self) -> ScenarioParameters:
        return ScenarioParameters(
            rate_per_unit=self.rate_per_kwh,
            system_cost=self.system_cost,
            co2_factor_per_unit=self.co2_factor_kg_per_kwh,
        )


class LoggingConfig(BaseModel):
    """Console / file log settings; an empty ``log_file`` disables the file."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/energy_readiness.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'; expected one of {', '.join(_LOG_LEVELS)}.")
        return level


class AppConfig(BaseModel):
    """All settings sections plus the global ``debug`` switch."""

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()
    data: DataConfig = DataConfig()
    scenario: ScenarioConfig = ScenarioConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> "AppConfig":
        """Validate a merged settings mapping section by section."""
        return cls(
            database=DatabaseConfig(**raw.get("database", {})),
            data=DataConfig(**raw.get("data", {})),
            scenario=ScenarioConfig(**raw.get("scenario", {})),
            logging=LoggingConfig(**raw.get("logging", {})),
            debug=raw.get("debug", False),
        )


def project_root() -> Path:
    """Directory holding ``pyproject.toml``; falls back to the package parent."""
    here = Path(__file__).resolve().parent
    for parent in (here, *here.parents[:4]):
        if (parent / "pyproject.toml").is_file():
            return parent
    return here.parent


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Merge every settings layer into a validated ``AppConfig``.

    Args:
        config_path: Base TOML file. Defaults to ``config/default.toml``
            under the project root.

    Raises:
        FileNotFoundError: If the base TOML file is missing.
        pydantic.ValidationError: If a merged value is invalid.
    """
    root = project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    base = Path(config_path) if config_path is not None else root / "config" / "default.toml"
    if not base.is_file():
        raise FileNotFoundError(
            f"Config file not found: {base}. "
            "Create config/default.toml or pass --config explicitly."
        )

    raw = _read_toml(base)
    local = base.with_name("local.toml")
    if local.is_file():
        raw = _deep_merge(raw, _read_toml(local))

    return AppConfig.from_mapping(_apply_env_overrides(raw))


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` laid over it; nested tables merge."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Copy non-empty ``ENV_OVERRIDES`` variables into ``raw``."""
    merged = dict(raw)
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value: Any = os.environ.get(env_name)
        if not value:
            continue
        if key == "debug":
            value = value.strip().lower() in _TRUTHY
        if section is None:
            merged[key] = value
        else:
            merged[section] = {**merged.get(section, {}), key: value}
    return merged
