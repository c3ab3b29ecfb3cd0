"""
Configuration utilities for loading, parsing, and writing WatchSync config files.
"""
import configparser
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Union
from utils.config.config_normalizer import ConfigNormalizer

logger = logging.getLogger(__name__)

ConfigType = Union[configparser.ConfigParser, Dict[str, Dict[str, Any]]]

DEFAULT_CONFIG_PATH = "./config/watchsync_config.ini"


@dataclass(frozen=True)
class PacingSettings:
    """Delays (seconds) between rate-limited upstream calls and the progress log cadence."""
    entry_delay: float = 0.5
    season_delay: float = 0.25
    show_delay: float = 0.5
    progress_every: int = 10


def load_configuration(path: str, normalize: bool = True) -> ConfigType:
    """
    Load the configuration file with optional normalization.

    Args:
        path (str): Path to the configuration file.
        normalize (bool): Whether to apply configuration normalization and environment overrides.

    Returns:
        Union[configparser.ConfigParser, Dict]: Loaded configuration parser or normalized dict.
    """
    parser = configparser.ConfigParser()
    read = parser.read(path)
    if not read:
        logger.warning(f"Configuration file not found or unreadable: {path}")

    if not normalize:
        logger.debug(f"Loading raw configuration from: {path}")
        return parser

    logger.debug(f"Loading and normalizing configuration from: {path}")
    normalized_config = ConfigNormalizer().normalize_and_override(parser)
    logger.info(f"Configuration loaded and normalized successfully from: {path}")
    return normalized_config


def write_temp_config(config_dict: dict, tmp_path: str) -> Path:
    """
    Write a temporary config.ini file from a dictionary of config sections.

    Args:
        config_dict (dict): Dictionary of config sections and values.
        tmp_path (str): Path to temporary directory.

    Returns:
        Path: Path to the written config file.
    """
    config = configparser.ConfigParser()
    for section, values in config_dict.items():
        config[section] = {key: str(value) for key, value in values.items()}

    config_path = Path(tmp_path) / "test_watchsync_config.ini"
    with open(config_path, "w") as f:
        config.write(f)

    return config_path


def get_config_section(config: ConfigType, section_name: str) -> Dict[str, Any]:
    """
    Get configuration section with case-insensitive lookup.

    Args:
        config: Configuration object (ConfigParser or normalized dict)
        section_name: Configuration section name

    Returns:
        Dict[str, Any]: Copy of the section data with lowercase keys

    Raises:
        ValueError: If section is not found
        TypeError: If config is not a supported type
    """
    if config is None:
        raise ValueError("Configuration object cannot be None")
    if not isinstance(section_name, str) or not section_name.strip():
        raise ValueError("Section name must be a non-empty string")

    normalizer = ConfigNormalizer()
    canonical_name = normalizer.canonical_section(section_name.strip())

    if isinstance(config, dict):
        sections = config
    elif isinstance(config, configparser.ConfigParser):
        sections = normalizer.normalize_config(config)
    else:
        raise TypeError(
            f"Unsupported configuration type: {type(config)}. "
            f"Expected ConfigParser or Dict[str, Dict[str, Any]]"
        )

    for name, data in sections.items():
        if normalizer.canonical_section(name) == canonical_name:
            return {str(key).lower(): value for key, value in data.items()}

    raise ValueError(
        f"Configuration section '{section_name}' not found. "
        f"Available sections: {sorted(sections.keys())}"
    )


def has_config_section(config: ConfigType, section_name: str) -> bool:
    """Check if configuration section exists (case-insensitive)."""
    try:
        get_config_section(config, section_name)
        return True
    except (ValueError, TypeError):
        return False


def get_config_value(
    config: ConfigType,
    section: str,
    key: str,
    fallback: Any = None,
    value_type: type = str
) -> Any:
    """
    Get a configuration value with case-insensitive lookup and type conversion.

    Args:
        config: Configuration object (ConfigParser or normalized dict)
        section: Configuration section name
        key: Configuration key name
        fallback: Default value if not found
        value_type: Type to convert the value to (str, int, float, bool)

    Returns:
        Configuration value converted to specified type or fallback

    Raises:
        ValueError: If value cannot be converted and no fallback is given
    """
    if config is None:
        return fallback
    if not isinstance(key, str) or not key.strip():
        raise ValueError("Key name must be a non-empty string")

    try:
        value = get_config_section(config, section).get(key.strip().lower(), fallback)
    except ValueError:
        value = fallback

    # Return fallback if value is None or empty string
    if value is None or (isinstance(value, str) and not value.strip()):
        return fallback

    try:
        if value_type == bool and isinstance(value, str):
            return value.strip().lower() in ('true', '1', 'yes', 'on', 'enabled')
        return value_type(value)
    except (ValueError, TypeError) as e:
        if fallback is not None:
            logger.warning(
                f"Failed to convert config value [{section}].{key}='{value}' to {value_type.__name__}: {e}. "
                f"Using fallback: {fallback}"
            )
            return fallback
        raise ValueError(
            f"Failed to convert config value [{section}].{key}='{value}' to {value_type.__name__}: {e}"
        )


def get_pacing_settings(config: ConfigType) -> PacingSettings:
    """Read the [pacing] and [import] settings, applying defaults for anything missing."""
    defaults = PacingSettings()
    return PacingSettings(
        entry_delay=get_config_value(config, "pacing", "entry_delay", defaults.entry_delay, float),
        season_delay=get_config_value(config, "pacing", "season_delay", defaults.season_delay, float),
        show_delay=get_config_value(config, "pacing", "show_delay", defaults.show_delay, float),
        progress_every=get_config_value(config, "import", "progress_every", defaults.progress_every, int),
    )
