"""Configuration loading for runf (.runf.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".runf.yml"
ENV_TOOLCHAIN_KEY = "RUNF_TOOLCHAIN"
ENUMERATE_MODES = ("all", "source-only")


@dataclass
class RuntimeConfig:
    """Runtime detection overrides."""

    description: Optional[str] = None


@dataclass
class ToolchainConfig:
    """Which executable to launch and how."""

    executable: str = "dotnet"
    arguments: List[str] = field(default_factory=lambda: ["run"])


@dataclass
class WorkspaceConfig:
    """Source enumeration and scratch directory settings."""

    enumerate: str = "all"
    source_extensions: List[str] = field(default_factory=lambda: [".cs"])
    exclude_paths: List[str] = field(default_factory=list)
    temp_dir: Optional[Path] = None


@dataclass
class DescriptorConfig:
    """Project descriptor rendering settings."""

    templates_dir: Optional[Path] = None


@dataclass
class RunfConfig:
    """Represents the settings defined in .runf.yml."""

    root: Path
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    descriptor: DescriptorConfig = field(default_factory=DescriptorConfig)
    config_file: Optional[Path] = None


def load_config(config_path: Path, *, environ: Mapping[str, str] | None = None) -> RunfConfig:
    """Load configuration from disk and apply environment overrides."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent

    config = RunfConfig(root=root)
    if config_file.is_file():
        config = _parse_config(root, config_file, _read_config(config_file))

    env = os.environ if environ is None else environ
    executable = env.get(ENV_TOOLCHAIN_KEY)
    if executable:
        config.toolchain.executable = executable
    return config


def _parse_config(root: Path, config_file: Path, data: Any) -> RunfConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    runtime_data = _as_dict(data.get("runtime"))
    runtime = RuntimeConfig(description=_as_str(runtime_data.get("description")))

    toolchain_data = _as_dict(data.get("toolchain"))
    toolchain = ToolchainConfig()
    executable = _as_str(toolchain_data.get("executable"))
    if executable:
        toolchain.executable = executable
    if "arguments" in toolchain_data:
        toolchain.arguments = _as_str_list(toolchain_data.get("arguments"))

    workspace_data = _as_dict(data.get("workspace"))
    workspace = WorkspaceConfig()
    mode = _as_str(workspace_data.get("enumerate"))
    if mode is not None:
        if mode not in ENUMERATE_MODES:
            raise ConfigError(
                f"workspace.enumerate must be one of {', '.join(ENUMERATE_MODES)}; got {mode!r}"
            )
        workspace.enumerate = mode
    if "source_extensions" in workspace_data:
        workspace.source_extensions = [
            _normalise_extension(ext) for ext in _as_str_list(workspace_data.get("source_extensions"))
        ]
    workspace.exclude_paths = _as_str_list(workspace_data.get("exclude_paths"))
    temp_dir = _as_str(workspace_data.get("temp_dir"))
    if temp_dir:
        workspace.temp_dir = root / Path(temp_dir).expanduser()

    descriptor_data = _as_dict(data.get("descriptor"))
    templates_dir = _as_str(descriptor_data.get("templates_dir"))
    descriptor = DescriptorConfig(templates_dir=root / templates_dir if templates_dir else None)

    return RunfConfig(
        root=root,
        runtime=runtime,
        toolchain=toolchain,
        workspace=workspace,
        descriptor=descriptor,
        config_file=config_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _normalise_extension(value: str) -> str:
    value = value.strip()
    if value and not value.startswith("."):
        value = f".{value}"
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ENUMERATE_MODES",
    "ENV_TOOLCHAIN_KEY",
    "DescriptorConfig",
    "RunfConfig",
    "RuntimeConfig",
    "ToolchainConfig",
    "WorkspaceConfig",
    "load_config",
]
