"""Configuration management for wgsimtruth."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any

import yaml

from wgsimtruth.constants import (
    DEFAULT_MAX_K,
    DEFAULT_MIN_MAPQ,
    MAX_CONTIG_NAME_LENGTH,
    MAX_IDENTIFIER_LENGTH,
)
from wgsimtruth.exceptions import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class RuntimeConfig:
    """Runtime configuration."""

    log_level: str = "WARNING"
    log_file: Optional[Path] = None
    # Enable tqdm progress where available
    enable_progress: bool = True

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level.upper())


@dataclass
class IdentifierConfig:
    """Size limits applied when decoding read identifiers."""

    max_identifier_length: int = MAX_IDENTIFIER_LENGTH
    max_contig_name_length: int = MAX_CONTIG_NAME_LENGTH

    def limits(self) -> Dict[str, int]:
        """Keyword arguments accepted by the decoder functions."""
        return {
            "max_identifier_length": self.max_identifier_length,
            "max_contig_name_length": self.max_contig_name_length,
        }


@dataclass
class EvaluationConfig:
    """Alignment evaluation settings."""

    max_k: int = DEFAULT_MAX_K
    min_mapq: int = DEFAULT_MIN_MAPQ
    include_secondary: bool = False
    include_supplementary: bool = False
    # Bases inserted between consecutive contigs in the genome coordinate space
    contig_padding: int = 0


@dataclass
class Config:
    """Main configuration class."""

    # Inputs (set via CLI or config file)
    reference: Optional[Path] = None
    fai: Optional[Path] = None

    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    identifier: IdentifierConfig = field(default_factory=IdentifierConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)

    @property
    def max_k(self) -> int:
        return self.evaluation.max_k

    @max_k.setter
    def max_k(self, value: int):
        self.evaluation.max_k = value

    def validate(self) -> None:
        """Validate configuration."""
        if self.runtime.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level {self.runtime.log_level!r}; expected one of {', '.join(LOG_LEVELS)}"
            )
        if self.identifier.max_identifier_length < 1:
            raise ConfigurationError("identifier.max_identifier_length must be >= 1")
        if self.identifier.max_contig_name_length < 1:
            raise ConfigurationError("identifier.max_contig_name_length must be >= 1")
        if self.evaluation.max_k < 0:
            raise ConfigurationError("evaluation.max_k must be >= 0")
        if self.evaluation.min_mapq < 0:
            raise ConfigurationError("evaluation.min_mapq must be >= 0")
        if self.evaluation.contig_padding < 0:
            raise ConfigurationError("evaluation.contig_padding must be >= 0")
        if self.reference is not None and not Path(self.reference).exists():
            raise ConfigurationError(f"Reference file not found: {self.reference}")
        if self.fai is not None and not Path(self.fai).exists():
            raise ConfigurationError(f"FASTA index not found: {self.fai}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""

        def path_to_str(obj):
            if isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: path_to_str(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [path_to_str(item) for item in obj]
            return obj

        return path_to_str(asdict(self))


def _coerce_option(name: str, default: Any, value: Any) -> Any:
    """Check a YAML value against the type of the option's default.

    Options whose default is ``None`` are paths.
    """
    if default is None:
        if value is None or value == "":
            return None
        if not isinstance(value, (str, Path)):
            raise ConfigurationError(f"Option '{name}' must be a path, got {value!r}")
        return Path(value)
    # bool is a subclass of int, so it is checked first
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigurationError(f"Option '{name}' must be true or false, got {value!r}")
    elif isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"Option '{name}' must be an integer, got {value!r}")
    elif isinstance(default, str) and not isinstance(value, str):
        raise ConfigurationError(f"Option '{name}' must be a string, got {value!r}")
    return value


def load_config(path: Path) -> Config:
    """Load configuration from YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    cfg = Config()

    for key in ("reference", "fai"):
        if data.get(key) is not None:
            setattr(cfg, key, _coerce_option(key, None, data[key]))

    sections = {
        "runtime": cfg.runtime,
        "identifier": cfg.identifier,
        "evaluation": cfg.evaluation,
    }
    unknown = [key for key in data if key not in sections and key not in ("reference", "fai")]
    if unknown:
        raise ConfigurationError("Unsupported config option(s): " + ", ".join(sorted(unknown)))

    for section_name, section in sections.items():
        values = data.get(section_name) or {}
        if not isinstance(values, dict):
            raise ConfigurationError(f"Config section '{section_name}' must be a mapping")
        for key, value in values.items():
            if not hasattr(section, key):
                raise ConfigurationError(f"Unknown option '{section_name}.{key}'")
            value = _coerce_option(f"{section_name}.{key}", getattr(section, key), value)
            setattr(section, key, value)

    return cfg


def save_config(cfg: Config, path: Path) -> None:
    """Save configuration to YAML file."""
    data = cfg.to_dict()
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
