import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from settee import DEFAULT_ENV_CONFIG_FILE_PATH, DEFAULT_HOST, DEFAULT_PORT
from settee.internal.credentials_store import profile_from_uri


@dataclass
class Environment:
    name: str
    host: str
    port: Union[str, int] = DEFAULT_PORT
    database: Optional[str] = None
    credentials: Optional[str] = None


@dataclass
class SetteeEnvConfig:
    environments: dict = field(default_factory=dict)
    default_environment: Optional[str] = None


def load_env_config(path: Union[str, Path] = DEFAULT_ENV_CONFIG_FILE_PATH) -> SetteeEnvConfig:
    """Load config from JSON file. Returns empty config if file doesn't exist."""
    expanded = Path(path).expanduser()
    if not expanded.exists():
        return SetteeEnvConfig()

    data = json.loads(expanded.read_text())

    environments = {}
    for name, env_data in data.get("environments", {}).items():
        credentials = env_data.get("credentials")
        if credentials and profile_from_uri(credentials) is None:
            credentials = str(Path(credentials).expanduser())
        environments[name] = Environment(
            name=name,
            host=env_data["host"],
            port=env_data.get("port", DEFAULT_PORT),
            database=env_data.get("database"),
            credentials=credentials,
        )

    return SetteeEnvConfig(
        environments=environments,
        default_environment=data.get("default_environment"),
    )


def resolve_environment(config: SetteeEnvConfig, env_name: Optional[str] = None) -> Environment:
    """Resolve which environment to use.

    Resolution order:
    1. Explicit env_name (--env flag)
    2. default_environment from config
    3. Fallback to a local server with credentials from env vars / keyring
    """
    if env_name:
        if env_name not in config.environments:
            raise ValueError(f"Unknown environment: {env_name}")
        return config.environments[env_name]

    if config.default_environment and config.default_environment in config.environments:
        return config.environments[config.default_environment]

    return Environment(name="default", host=DEFAULT_HOST, port=DEFAULT_PORT)
