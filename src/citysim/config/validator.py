"""Centralized configuration validation for citysim."""

from __future__ import annotations

import re
import warnings
from pathlib import Path
from typing import Any, Iterable

import yaml

from citysim.config.schema import Config
from citysim.errors import UnknownEntity

# Model occupations the reference equations look up by name
MODEL_OCCUPATIONS = ("collector", "researcher", "crafter", "teacher", "builder", "artist")

# Mapping-valued sections holding initial values of singleton records
STATE_SECTIONS = ("resources", "stats", "aggregates", "buildings", "aims")


class ConfigValidator:
    """
    Centralized validation for simulation configuration.

    All validation happens once at Simulation.init() to ensure:
    - Type correctness
    - Valid parameter ranges
    - Relationship constraints between parameters
    - Clear error messages with actionable feedback
    """

    VALID_LOG_LEVELS = {"DEEP_DEBUG", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    @staticmethod
    def validate_config(cfg: dict[str, Any]) -> None:
        """
        Validate all configuration parameters.

        Parameters
        ----------
        cfg : dict
            Merged configuration dictionary.

        Raises
        ------
        ValueError
            If any validation check fails.
        """
        ConfigValidator._validate_types(cfg)
        ConfigValidator._validate_jobs(cfg)
        ConfigValidator._validate_sections(cfg)
        ConfigValidator._validate_ranges(cfg)
        ConfigValidator._validate_relationships(cfg)

        if "links" in cfg:
            ConfigValidator._validate_links(cfg["links"])
        if "logging" in cfg:
            ConfigValidator._validate_logging(cfg["logging"])

    @staticmethod
    def _validate_types(cfg: dict[str, Any]) -> None:
        """Ensure correct types for scalar configuration parameters."""
        for key in Config.field_names():
            if key not in cfg:
                continue
            val = cfg[key]
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                raise ValueError(
                    f"Config parameter '{key}' must be float, got {type(val).__name__}"
                )

        if "n_ticks" in cfg:
            val = cfg["n_ticks"]
            if isinstance(val, bool) or not isinstance(val, int):
                raise ValueError(
                    f"Config parameter 'n_ticks' must be int, got {type(val).__name__}"
                )

        if "pipeline_path" in cfg:
            val = cfg["pipeline_path"]
            if val is not None and not isinstance(val, str):
                raise ValueError(
                    f"Config parameter 'pipeline_path' must be str or None, "
                    f"got {type(val).__name__}"
                )

    @staticmethod
    def _validate_jobs(cfg: dict[str, Any]) -> None:
        """Job names must be a non-empty list of unique, non-empty strings."""
        jobs = cfg.get("jobs")
        if not isinstance(jobs, (list, tuple)) or not jobs:
            raise ValueError("Config parameter 'jobs' must be a non-empty list of names")

        seen: set[str] = set()
        for name in jobs:
            if not isinstance(name, str) or not name:
                raise ValueError(f"Job name must be a non-empty str, got {name!r}")
            if name in seen:
                raise ValueError(f"Duplicate job name '{name}'")
            if name in STATE_SECTIONS:
                raise ValueError(f"Job name '{name}' clashes with a city record name")
            seen.add(name)

    @staticmethod
    def _validate_sections(cfg: dict[str, Any]) -> None:
        """Check initial-value sections only name known numeric fields."""
        from citysim.roles import Aggregates, Aims, Buildings, Job, Resources, Stats

        roles = {
            "resources": Resources,
            "stats": Stats,
            "aggregates": Aggregates,
            "buildings": Buildings,
            "aims": Aims,
        }
        for section, role_cls in roles.items():
            ConfigValidator._check_mapping(section, cfg.get(section, {}), role_cls.field_names())

        job_init = cfg.get("job_init", {}) or {}
        if not isinstance(job_init, dict):
            raise ValueError(
                f"Config section 'job_init' must be a mapping, "
                f"got {type(job_init).__name__}"
            )
        jobs = set(cfg.get("jobs", []))
        for job_name, values in job_init.items():
            if job_name not in jobs:
                raise ValueError(
                    f"job_init names unknown job '{job_name}'. "
                    f"Known jobs: {sorted(jobs)}"
                )
            ConfigValidator._check_mapping(
                f"job_init.{job_name}", values, Job.field_names()
            )

    @staticmethod
    def _check_mapping(section: str, values: Any, allowed: Iterable[str]) -> None:
        if values is None:
            return
        if not isinstance(values, dict):
            raise ValueError(
                f"Config section '{section}' must be a mapping, "
                f"got {type(values).__name__}"
            )
        allowed = tuple(allowed)
        for key, val in values.items():
            if key not in allowed:
                raise ValueError(
                    f"Unknown field '{key}' in section '{section}'. "
                    f"Allowed fields: {', '.join(allowed)}"
                )
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                raise ValueError(
                    f"Field '{section}.{key}' must be float, got {type(val).__name__}"
                )

    @staticmethod
    def _validate_ranges(cfg: dict[str, Any]) -> None:
        """
        Ensure parameters are in valid ranges.

        Raises
        ------
        ValueError
            If any parameter is out of valid range.
        """
        # (min, max, min_exclusive); None means unbounded
        constraints: dict[str, tuple[float | None, float | None, bool]] = {
            "n_ticks": (1, None, False),
            "stats.death_rate": (0.0, 1.0, True),
            "stats.idleness": (0.0, None, False),
            "resources.food_spoilage": (0.0, 1.0, True),
            "buildings.farm_area": (0.0, None, False),
            "buildings.mine_area": (0.0, None, False),
            "buildings.work_area": (0.0, None, False),
            "buildings.habitations": (0.0, None, False),
            "aims.happiness": (0.0, None, True),
            "aims.productivity": (0.0, None, False),
            "aggregates.population": (0.0, None, False),
            "emergency_cap": (0.0, 1.0, False),
        }
        for key in Config.field_names():
            constraints.setdefault(key, (0.0, None, False))

        for key, (min_val, max_val, exclusive) in constraints.items():
            val = ConfigValidator._lookup(cfg, key)
            if val is None:
                continue

            if min_val is not None:
                if exclusive and val <= min_val:
                    raise ValueError(
                        f"Config parameter '{key}' must be > {min_val}, got {val}"
                    )
                if not exclusive and val < min_val:
                    raise ValueError(
                        f"Config parameter '{key}' must be >= {min_val}, got {val}"
                    )
            if max_val is not None and val > max_val:
                raise ValueError(
                    f"Config parameter '{key}' must be <= {max_val}, got {val}"
                )

        for job_name, values in (cfg.get("job_init") or {}).items():
            pop = (values or {}).get("population", 0.0)
            if pop < 0:
                raise ValueError(
                    f"Config parameter 'job_init.{job_name}.population' must be "
                    f">= 0, got {pop}"
                )

    @staticmethod
    def _lookup(cfg: dict[str, Any], dotted: str) -> Any:
        section, _, key = dotted.partition(".")
        if not key:
            return cfg.get(section)
        return (cfg.get(section) or {}).get(key)

    @staticmethod
    def _validate_relationships(cfg: dict[str, Any]) -> None:
        """Warn about legal but suspicious starting states."""
        population = ConfigValidator._lookup(cfg, "aggregates.population") or 0.0
        habitations = ConfigValidator._lookup(cfg, "buildings.habitations") or 0.0

        if population > 2.0 * habitations:
            warnings.warn(
                f"aggregates.population ({population}) exceeds twice the "
                f"habitations ({habitations}). Migration and natality start at 0.",
                UserWarning,
                stacklevel=3,
            )

        avg_demand = ConfigValidator._lookup(cfg, "aggregates.avg_demand")
        if avg_demand is not None and avg_demand == 0.0:
            warnings.warn(
                "aggregates.avg_demand is 0: the first tick cannot split growth "
                "between jobs and will raise a DivisionHazard.",
                UserWarning,
                stacklevel=3,
            )

    @staticmethod
    def _validate_links(links: Any) -> None:
        """
        Validate the structure of YAML-declared simple links.

        Entity and field names are checked later, when the links are
        declared on the store.
        """
        if links is None:
            return
        if not isinstance(links, list):
            raise ValueError(f"Config 'links' must be a list, got {type(links).__name__}")
        for i, spec in enumerate(links):
            if not isinstance(spec, dict):
                raise ValueError(f"Link at index {i} must be a mapping")
            missing = {"src", "dst", "field", "delta"} - set(spec)
            if missing:
                raise ValueError(
                    f"Link at index {i} is missing keys: {', '.join(sorted(missing))}"
                )
            if not isinstance(spec["delta"], (dict, list)):
                raise ValueError(
                    f"Link at index {i}: 'delta' must be a mapping or a list of weights"
                )

    @staticmethod
    def _validate_logging(log_config: dict[str, Any]) -> None:
        """
        Validate logging configuration.

        Parameters
        ----------
        log_config : dict
            Logging configuration dictionary with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG')
            - events: dict[str, str] (per-event overrides)

        Raises
        ------
        ValueError
            If logging configuration is invalid.
        """
        if not isinstance(log_config, dict):
            raise ValueError(
                f"Logging config must be dict, got {type(log_config).__name__}"
            )

        if "default_level" in log_config:
            level = log_config["default_level"]
            if not isinstance(level, str):
                raise ValueError(
                    f"Logging default_level must be str, got {type(level).__name__}"
                )
            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}'. "
                    f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                )

        events = log_config.get("events") or {}
        if not isinstance(events, dict):
            raise ValueError(f"Logging events must be dict, got {type(events).__name__}")
        for event_name, level in events.items():
            if not isinstance(level, str):
                raise ValueError(
                    f"Log level for event '{event_name}' must be str, "
                    f"got {type(level).__name__}"
                )
            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}' for event '{event_name}'. "
                    f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                )

    @staticmethod
    def validate_model_jobs(job_names: Iterable[str]) -> None:
        """
        Ensure every occupation used by the reference equations exists.

        Raises
        ------
        UnknownEntity
            If a model occupation is missing from the job list.
        """
        names = list(job_names)
        for occupation in MODEL_OCCUPATIONS:
            if occupation not in names:
                raise UnknownEntity(occupation, names)

    @staticmethod
    def validate_pipeline_path(pipeline_path: str) -> None:
        """
        Validate pipeline path exists and is readable.

        Raises
        ------
        ValueError
            If path does not exist or is not a file.
        """
        path = Path(pipeline_path)

        if not path.exists():
            raise ValueError(f"Pipeline path '{pipeline_path}' does not exist")
        if not path.is_file():
            raise ValueError(f"Pipeline path '{pipeline_path}' is not a file")
        if path.suffix not in (".yml", ".yaml"):
            warnings.warn(
                f"Pipeline path '{pipeline_path}' does not have .yml/.yaml extension",
                UserWarning,
                stacklevel=2,
            )

    @staticmethod
    def validate_pipeline_yaml(yaml_path: str) -> None:
        """
        Validate pipeline YAML file structure and event references.

        Raises
        ------
        ValueError
            If YAML structure is invalid or references unknown events.
        """
        from citysim.core.registry import list_events

        with open(Path(yaml_path)) as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict):
            raise ValueError(
                f"Pipeline YAML must be a dictionary, got {type(config).__name__}"
            )
        if "events" not in config:
            raise ValueError(f"Pipeline YAML must have 'events' key: {yaml_path}")

        event_specs = config["events"]
        if not isinstance(event_specs, list):
            raise ValueError(
                f"Pipeline 'events' must be a list, got {type(event_specs).__name__}"
            )

        registered_events = set(list_events())
        for i, spec in enumerate(event_specs):
            if not isinstance(spec, str):
                raise ValueError(
                    f"Event spec at index {i} must be str, got {type(spec).__name__}"
                )
            for name in ConfigValidator._parse_event_spec_for_validation(spec):
                if name not in registered_events:
                    raise ValueError(
                        f"Event '{name}' (from spec '{spec}') not found in registry. "
                        f"Available events: {sorted(registered_events)}"
                    )

    @staticmethod
    def _parse_event_spec_for_validation(spec: str) -> list[str]:
        """Extract the event names referenced by one spec (repeats collapsed)."""
        spec = spec.strip()

        match = re.match(r"^(.+?)\s*<->\s*(.+?)\s+x\s+(\d+)$", spec)
        if match:
            return [match.group(1).strip(), match.group(2).strip()]

        match = re.match(r"^(.+?)\s+x\s+(\d+)$", spec)
        if match:
            return [match.group(1).strip()]

        return [spec]
