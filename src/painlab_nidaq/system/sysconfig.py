"""Configuration file handling.

Three files make up a device configuration, all JSON:

- ``channel-config.json``: :class:`~painlab_nidaq.types.ChannelConfig`
- ``network-config.json``: :class:`~painlab_nidaq.types.NetworkConfig`
- ``device-descriptor.json``: sent verbatim to the hub at registration

Each file is looked up independently, first match wins:

1. an explicit config directory (``--config-dir``)
2. the user config directory (``~/.painlab/``)
3. the defaults bundled with the package (``painlab_nidaq/resources/``)
"""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from painlab_nidaq.types import ChannelConfig, ConfigError, NetworkConfig
from painlab_nidaq.util import USER_CONFIG_DIR

CHANNEL_CONFIG_FILE = "channel-config.json"
NETWORK_CONFIG_FILE = "network-config.json"
DESCRIPTOR_FILE = "device-descriptor.json"
CONFIG_FILES = (CHANNEL_CONFIG_FILE, NETWORK_CONFIG_FILE, DESCRIPTOR_FILE)


@dataclass(frozen=True)
class DeviceConfig:
    """Everything the device process needs at startup."""

    channel: ChannelConfig
    network: NetworkConfig
    descriptor: bytes
    sources: dict[str, Path]


def package_config_dir() -> Path:
    return Path(__file__).parent.parent / "resources"


def search_dirs(config_dir: Optional[Path | str] = None) -> list[Path]:
    dirs = []
    if config_dir is not None:
        dirs.append(Path(config_dir))
    dirs.append(USER_CONFIG_DIR)
    dirs.append(package_config_dir())
    return dirs


def find_config_file(name: str, config_dir: Optional[Path | str] = None) -> Path:
    for d in search_dirs(config_dir):
        candidate = d / name
        if candidate.is_file():
            return candidate
    raise ConfigError(
        f"{name} not found in any of: "
        + ", ".join(str(d) for d in search_dirs(config_dir))
    )


def _read_json(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as f:
            d = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from e
    if not isinstance(d, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return d


def load_channel_config(config_dir: Optional[Path | str] = None) -> ChannelConfig:
    path = find_config_file(CHANNEL_CONFIG_FILE, config_dir)
    try:
        cfg = ChannelConfig.from_dict(_read_json(path))
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"Invalid channel configuration in {path}: {e}") from e
    logger.info(
        "Loaded channel config from {}: {} ({})",
        path,
        cfg.device_name,
        cfg.switch_channel_method.value,
    )
    return cfg


def load_network_config(config_dir: Optional[Path | str] = None) -> NetworkConfig:
    path = find_config_file(NETWORK_CONFIG_FILE, config_dir)
    try:
        cfg = NetworkConfig.from_dict(_read_json(path))
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"Invalid network configuration in {path}: {e}") from e
    logger.info("Loaded network config from {}: {}", path, cfg.endpoint)
    return cfg


def load_descriptor(config_dir: Optional[Path | str] = None) -> bytes:
    """Read the device descriptor as raw bytes. It is not parsed, only checked."""
    path = find_config_file(DESCRIPTOR_FILE, config_dir)
    blob = path.read_bytes()
    try:
        json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Device descriptor {path} is not valid JSON: {e}") from e
    logger.info("Loaded device descriptor from {} ({} bytes)", path, len(blob))
    return blob


def load_device_config(config_dir: Optional[Path | str] = None) -> DeviceConfig:
    return DeviceConfig(
        channel=load_channel_config(config_dir),
        network=load_network_config(config_dir),
        descriptor=load_descriptor(config_dir),
        sources={
            name: find_config_file(name, config_dir) for name in CONFIG_FILES
        },
    )


def install_default_config(
    dest: Optional[Path | str] = None, overwrite: bool = False
) -> list[Path]:
    """Copy the bundled default configuration files into ``dest``.

    Returns the files written. Existing files are kept unless ``overwrite``.
    """
    dest = USER_CONFIG_DIR if dest is None else Path(dest)
    dest.mkdir(parents=True, exist_ok=True)
    written = []
    for name in CONFIG_FILES:
        target = dest / name
        if target.exists() and not overwrite:
            logger.info("Keeping existing {}", target)
            continue
        shutil.copyfile(package_config_dir() / name, target)
        logger.info("Installed {}", target)
        written.append(target)
    return written
