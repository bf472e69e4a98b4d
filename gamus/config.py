"""Configuration of a command line evaluation run.

Config files are YAML (``.yml`` / ``.yaml``) or JSON. Example::

    log_level: INFO
    table: data/example.csv
    seed: 42
    runs: 5
    limit: 60
    start_times: {min: 0, max: 40}
    output: {dir: results, gantt: true, report: true}
    generator: {enabled: false, jobs: 3, operations: 3, machines: 3, seed: 0}
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

_TRUE_STRINGS = ("true", "yes", "on", "1")
_FALSE_STRINGS = ("false", "no", "off", "0")


def _as_bool(value: Any, key: str) -> bool:
    """Accept real booleans or their usual string spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"'{key}' must be a boolean, got {value!r}")


@dataclass(slots=True)
class GeneratorConfig:
    enabled: bool = False
    jobs: int = 3
    operations: int = 3
    machines: int = 3
    seed: int = 0
    max_duration: int = 99
    zero_share: float = 0.0


@dataclass(slots=True)
class SimulationConfig:
    """All settings read from a config file.

    ``max_start`` None means "up to limit - 1".
    """

    limit: int
    table: Optional[str] = None
    seed: Optional[int] = None
    runs: int = 1
    min_start: int = 0
    max_start: Optional[int] = None
    log_level: str = "INFO"
    output_dir: str = "results"
    gantt: bool = False
    print_report: bool = True
    generator: Optional[GeneratorConfig] = None

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "SimulationConfig":
        if "limit" not in cfg:
            raise ValueError("Missing 'limit' key in config")
        start_cfg = cfg.get("start_times", {}) if isinstance(cfg.get("start_times"), dict) else {}
        out_cfg = cfg.get("output", {}) if isinstance(cfg.get("output"), dict) else {}
        gen_cfg = cfg.get("generator", {}) if isinstance(cfg.get("generator"), dict) else {}

        generator = None
        if _as_bool(gen_cfg.get("enabled", False), "generator.enabled"):
            generator = GeneratorConfig(
                enabled=True,
                jobs=int(gen_cfg.get("jobs", 3)),
                operations=int(gen_cfg.get("operations", 3)),
                machines=int(gen_cfg.get("machines", 3)),
                seed=int(gen_cfg.get("seed", 0)),
                max_duration=int(gen_cfg.get("max_duration", 99)),
                zero_share=float(gen_cfg.get("zero_share", 0.0)),
            )

        table = cfg.get("table")
        if generator is None and not table:
            raise ValueError("Missing 'table' key in config (or enable generator)")

        seed = cfg.get("seed")
        max_start = start_cfg.get("max")
        config = cls(
            limit=int(cfg["limit"]),
            table=table,
            seed=int(seed) if seed is not None else None,
            runs=int(cfg.get("runs", 1)),
            min_start=int(start_cfg.get("min", 0)),
            max_start=int(max_start) if max_start is not None else None,
            log_level=str(cfg.get("log_level", "INFO")),
            output_dir=str(out_cfg.get("dir", "results")),
            gantt=_as_bool(out_cfg.get("gantt", False), "output.gantt"),
            print_report=_as_bool(out_cfg.get("report", True), "output.report"),
            generator=generator,
        )
        if config.limit < 1:
            raise ValueError(f"'limit' must be positive, got {config.limit}")
        if config.runs < 1:
            raise ValueError(f"'runs' must be positive, got {config.runs}")
        if config.max_start is not None and config.max_start < config.min_start:
            raise ValueError("'start_times.max' is lower than 'start_times.min'")
        return config


def load_config(config_file: str) -> SimulationConfig:
    """Load a YAML or JSON config file."""
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith((".yml", ".yaml")):
        cfg = yaml.safe_load(text) or {}
    else:
        cfg = json.loads(text)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config root must be a mapping: {config_file}")
    return SimulationConfig.from_dict(cfg)
