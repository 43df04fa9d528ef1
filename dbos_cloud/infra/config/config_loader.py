"""Local ``dbos-config.yaml`` loading, backup and saving."""

import shutil
import time
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from dbos_cloud.infra.constants import CLOUD

CONFIG_PATH = CLOUD.default_config_path


def load_config(file_path: Path = CONFIG_PATH) -> dict[str, Any]:
    """
    Load the local configuration file as a raw mapping.

    Environment placeholders such as ``${PGPASSWORD}`` are left untouched so
    that a load/modify/save cycle does not bake secrets into the file.

    Args:
        file_path: Path to the YAML file (default: dbos-config.yaml)

    Returns:
        The parsed mapping. An empty file yields an empty dict.

    Raises:
        ValueError: If the YAML cannot be parsed or is not a mapping
        FileNotFoundError: If the YAML file doesn't exist
    """
    with open(file_path) as f:
        content = f.read()

    try:
        loaded = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML in {file_path}: {e}") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(
            f"Invalid YAML structure in {file_path}: expected a mapping at the top level"
        )
    return loaded


def backup_config(file_path: Path = CONFIG_PATH, *, now: float | None = None) -> Path:
    """Copy the configuration file to ``<name>.<epoch-ms>.bak`` next to it.

    Args:
        file_path: Configuration file to back up
        now: Timestamp in seconds, defaults to the current time

    Returns:
        Path of the backup file
    """
    stamp = int((time.time() if now is None else now) * 1000)
    backup_path = file_path.with_name(f"{file_path.name}.{stamp}.bak")
    shutil.copy2(file_path, backup_path)
    logger.debug(f"Backed up {file_path} to {backup_path}")
    return backup_path


def _string_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    """Custom YAML representer that quotes strings containing special characters or that look like env vars.

    Args:
        dumper: YAML dumper instance
        data: String data to represent

    Returns:
        YAML scalar node with appropriate quoting style
    """
    # Quote strings that contain ${...} patterns or look like numbers
    if "${" in data or data.isdigit():
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


def save_config(config: dict[str, Any], file_path: Path = CONFIG_PATH) -> None:
    """Save the given configuration to a YAML file. In order to do it transactionally,
    it first writes to a temporary file and then renames it to the target path.

    Args:
        config: Mapping to save
        file_path: Destination path (default: dbos-config.yaml)

    Note:
        Strings containing ${...} patterns or numeric-looking strings will be
        quoted to preserve their string type when reloaded.
    """
    temp_path = file_path.with_suffix(".tmp")

    class QuotedDumper(yaml.SafeDumper):
        pass

    QuotedDumper.add_representer(str, _string_representer)

    with open(temp_path, "w") as f:
        yaml.dump(
            config,
            f,
            Dumper=QuotedDumper,
            default_flow_style=False,
            sort_keys=False,
            indent=2,
        )
    if file_path.exists():
        shutil.copymode(file_path, temp_path)
    temp_path.replace(file_path)
    logger.debug(f"Wrote configuration to {file_path}")


def apply_database_connection(
    config: dict[str, Any],
    *,
    hostname: str | None,
    port: int | None,
    username: str | None,
    password: str,
) -> dict[str, Any]:
    """Point the ``database`` section of ``config`` at a cloud instance.

    The section is created when absent; its other keys are preserved.
    """
    database = config.get("database")
    if not isinstance(database, dict):
        database = {}
        config["database"] = database

    database["hostname"] = hostname
    database["port"] = port
    database["username"] = username
    database["password"] = password
    return config
