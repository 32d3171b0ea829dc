import yaml
from pathlib import Path
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import logging
import re

from weatherservice.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "location": "Unknown",
    "database": {
        "path": "~/.weatherservice/weather.db",
    },
    "api": {
        "host": "127.0.0.1",
        "port": 8000,
    },
    "seed": {
        "days": 5,
        "reseed_if_empty": True,
    },
    "client": {
        "base_url": "http://127.0.0.1:8000",
        "timeout": 10.0,
    },
    "logging": {
        "level": "INFO",
        "file": "~/.weatherservice/weatherservice.log",
    },
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class DatabaseConfig:
    url: Optional[str] = None
    path: Optional[str] = None


@dataclass(frozen=True)
class ApiConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass(frozen=True)
class SeedConfig:
    days: int = 5
    reseed_if_empty: bool = True


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = "http://127.0.0.1:8000"
    timeout: float = 10.0


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    """Typed application config, validated once at startup and passed to each consumer."""
    location: str = "Unknown"
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    seed: SeedConfig = field(default_factory=SeedConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    config_file: Optional[Path] = None


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load config from YAML. Creates a default file if none exists, loads a .env file
    if one is found, and substitutes ${VAR} / $VAR values from the environment.
    """
    if config_path:
        config_file = Path(config_path).expanduser().resolve()
    else:
        config_file = Path.cwd() / "config.yaml"
    logger.debug(f"Using config file: {config_file}")

    _load_env_file(config_file.parent)
    _ensure_config_exists(config_file)

    try:
        with open(config_file) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config {config_file}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Invalid config format: root must be a dictionary")

    data = _substitute_env_vars(data)
    config = config_from_dict(data, config_file=config_file)
    logger.debug(f"Loaded config: {config}")
    return config


def config_from_dict(data: Dict[str, Any], config_file: Optional[Path] = None) -> AppConfig:
    """Build and validate AppConfig from a plain dict (YAML root)."""
    database = _section(data, "database")
    api = _section(data, "api")
    seed = _section(data, "seed")
    client = _section(data, "client")
    log = _section(data, "logging")

    location = data.get("location", "Unknown")
    if not isinstance(location, str) or not location.strip():
        raise ConfigError("location must be a non-empty string")

    db_url = database.get("url")
    db_path = database.get("path")
    if db_path:
        db_path = os.path.expanduser(str(db_path))

    port = _as_int(api.get("port", 8000), "api.port")
    if not (0 < port < 65536):
        raise ConfigError(f"api.port out of range: {port}")

    days = _as_int(seed.get("days", 5), "seed.days")
    if days < 1:
        raise ConfigError(f"seed.days must be at least 1, got {days}")

    base_url = str(client.get("base_url", "http://127.0.0.1:8000")).rstrip("/")
    if not re.match(r"^https?://", base_url):
        raise ConfigError(f"client.base_url must be an http(s) URL, got {base_url!r}")
    try:
        timeout = float(client.get("timeout", 10.0))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"client.timeout must be a number: {e}") from e
    if timeout <= 0:
        raise ConfigError("client.timeout must be positive")

    level = str(log.get("level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(_LOG_LEVELS)}")
    log_file = log.get("file")
    if log_file:
        log_file = os.path.expanduser(str(log_file))

    return AppConfig(
        location=location.strip(),
        database=DatabaseConfig(url=db_url, path=db_path),
        api=ApiConfig(host=str(api.get("host", "127.0.0.1")), port=port),
        seed=SeedConfig(days=days, reseed_if_empty=_as_bool(seed.get("reseed_if_empty", True), "seed.reseed_if_empty")),
        client=ClientConfig(base_url=base_url, timeout=timeout),
        logging=LoggingConfig(level=level, file=log_file),
        config_file=config_file,
    )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    return value


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


_TRUE_STRINGS = ("true", "yes", "1")
_FALSE_STRINGS = ("false", "no", "0")


def _as_bool(value: Any, name: str) -> bool:
    # Values substituted from the environment arrive as strings
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ConfigError(f"{name} must be true or false, got {value!r}")


def _ensure_config_exists(config_file: Path) -> None:
    """Create default config if it doesn't exist"""
    if config_file.exists():
        return
    if not config_file.parent.exists():
        logger.info(f"Creating config directory: {config_file.parent}")
        config_file.parent.mkdir(parents=True)
    logger.info(f"Creating default config file: {config_file}")
    config_file.write_text(yaml.dump(DEFAULT_CONFIG))


def _load_env_file(config_dir: Path) -> None:
    """Load environment variables from .env file"""
    # Look for .env file in config directory or project root
    env_files = [
        config_dir / ".env",
        config_dir.parent / ".env",
        Path.cwd() / ".env",
    ]

    env_file = None
    for path in env_files:
        if path.exists():
            env_file = path
            break

    if not env_file:
        logger.debug("No .env file found, skipping environment variable loading")
        return

    logger.info(f"Loading environment variables from: {env_file}")
    try:
        with open(env_file, 'r') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue

                match = re.match(r'^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$', line)
                if match:
                    key, value = match.groups()
                    value = value.strip('"').strip("'")
                    # Existing environment wins
                    if key not in os.environ:
                        os.environ[key] = value
                        logger.debug(f"Loaded env var: {key}")
    except OSError as e:
        logger.warning(f"Error loading .env file: {e}")


def _substitute_env_vars(data: Any) -> Any:
    """Recursively substitute environment variables in config data"""
    if isinstance(data, dict):
        return {key: _substitute_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars(item) for item in data]
    elif isinstance(data, str):
        # Format: ${VAR_NAME} or $VAR_NAME
        if data.startswith('${') and data.endswith('}'):
            return os.environ.get(data[2:-1], data)
        elif data.startswith('$') and len(data) > 1:
            return os.environ.get(data[1:], data)
        return data
    else:
        return data
