"""Loading vacancy configuration from plain dicts and files.

Two spellings are accepted:

    # Plugin layout (config.yml converted to JSON/TOML)
    {"cooldown-seconds": 10,
     "worlds": {"world_nether": {"view-distance": 4, "simulation-distance": 3}}}

    # Underscore layout
    {"cooldown_seconds": 10,
     "zones": {"world_nether": {"view_distance": 4, "simulation_distance": 3}}}

All validation happens here, at load time, never during evaluation.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from .models import ConfigError, VacancyConfig, ZoneConfig

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 10


def _get(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Read a key in either dashed or underscored spelling."""
    if key in data:
        return data[key]
    return data.get(key.replace("_", "-"), default)


def _require_int(zone: str, key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"Zone '{zone}': {key} must be an integer, got {value!r}")
    return value


def load_config(data: Dict[str, Any]) -> VacancyConfig:
    """
    Build a VacancyConfig from a config dict.

    Args:
        data: Parsed configuration

    Returns:
        Validated VacancyConfig

    Raises:
        ConfigError: If any value is missing or invalid
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

    zones_data = _get(data, "zones")
    if zones_data is None:
        zones_data = data.get("worlds", {})
    if not isinstance(zones_data, dict):
        raise ConfigError("'worlds' must be a mapping of zone name to distances")

    zones = []
    for name, zone_data in zones_data.items():
        if not isinstance(zone_data, dict):
            raise ConfigError(f"Zone '{name}': expected a mapping, got {zone_data!r}")

        view = _get(zone_data, "view_distance")
        sim = _get(zone_data, "simulation_distance", _get(zone_data, "sim_distance"))
        if view is None or sim is None:
            raise ConfigError(f"Zone '{name}': view-distance and simulation-distance are required")

        zones.append(
            ZoneConfig(
                name=str(name),
                reduced_view_distance=_require_int(name, "view-distance", view),
                reduced_sim_distance=_require_int(name, "simulation-distance", sim),
            )
        )
        logger.debug(f"Loaded zone {name}: view={view} sim={sim}")

    kwargs: Dict[str, Any] = {
        "zones": tuple(zones),
        "cooldown_seconds": _get(data, "cooldown_seconds", DEFAULT_COOLDOWN_SECONDS),
    }
    for key in ("settle_delay", "reload_settle_delay", "command_prefix"):
        value = _get(data, key)
        if value is not None:
            kwargs[key] = value

    config = VacancyConfig(**kwargs)
    if not config.zones:
        logger.warning("No zones configured; vacancy tracking is idle")
    logger.info(
        f"Loaded vacancy config: {len(config.zones)} zones, "
        f"cooldown={config.cooldown_seconds}s"
    )
    return config


def load_config_file(path: str | Path) -> VacancyConfig:
    """
    Load a VacancyConfig from a .json or .toml file.

    Args:
        path: Config file path

    Returns:
        Validated VacancyConfig

    Raises:
        ConfigError: If the file type is unsupported or the content is invalid
        OSError: If the file cannot be read
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        elif suffix == ".toml":
            with path.open("rb") as f:
                data = tomllib.load(f)
        else:
            raise ConfigError(f"Unsupported config file type: {path.name}")
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e

    return load_config(data)
