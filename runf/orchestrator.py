"""Pipeline orchestration: source directory in, toolchain exit code out."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Mapping, TextIO

from .config import CONFIG_FILENAME, RunfConfig, load_config
from .descriptor import write_descriptor
from .errors import EnumerationError
from .logging import get_logger
from .models import ProjectInfo, Workspace
from .runtime import describe_runtime, resolve_target_framework
from .toolchain import ToolchainInvoker, find_toolchain
from .workspace import create_scratch_directory, enumerate_source_files, materialize

_LOGGER = get_logger("orchestrator")


class Orchestrator:
    """Coordinates a single runf invocation."""

    def __init__(
        self,
        *,
        invoker: ToolchainInvoker | None = None,
        config_loader: Callable[..., RunfConfig] = load_config,
        runtime_describer: Callable[..., str] = describe_runtime,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._invoker = invoker or ToolchainInvoker()
        self._load_config = config_loader
        self._describe_runtime = runtime_describer
        self._environ = os.environ if environ is None else environ

    def load_config(self, source_directory: str | Path) -> RunfConfig:
        return self._load_config(Path(source_directory) / CONFIG_FILENAME, environ=self._environ)

    def prepare(self, source_directory: str | Path, config: RunfConfig | None = None) -> Workspace:
        """Materialize ``source_directory`` into a scratch workspace with a descriptor."""
        source_root = Path(source_directory)
        if config is None:
            config = self.load_config(source_root)
        toolchain = self._toolchain_path(config)

        description = self._describe_runtime(
            toolchain,
            explicit=config.runtime.description,
            environ=self._environ,
        )
        project = ProjectInfo(target_framework=resolve_target_framework(description))
        _LOGGER.debug("Resolved target framework %s", project.target_framework)

        workspace_config = config.workspace
        exclude_paths = list(workspace_config.exclude_paths)
        if config.config_file is not None:
            exclude_paths.append(f"/{CONFIG_FILENAME}")
        project.source_files.extend(
            enumerate_source_files(
                source_root,
                mode=workspace_config.enumerate,
                extensions=workspace_config.source_extensions,
                exclude_paths=exclude_paths,
            )
        )
        if not project.source_files:
            raise EnumerationError("No source files found")

        destination = create_scratch_directory(workspace_config.temp_dir)
        _LOGGER.debug("Scratch workspace: %s", destination)
        materialize(
            project,
            source_root,
            destination,
            extensions=workspace_config.source_extensions,
        )
        descriptor_path = write_descriptor(
            project,
            destination,
            templates_dir=config.descriptor.templates_dir,
        )
        return Workspace(
            source_root=source_root,
            path=destination,
            descriptor_path=descriptor_path,
            project=project,
        )

    def run(
        self,
        source_directory: str | Path,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> int:
        """Prepare the workspace, run the toolchain there and return its exit code."""
        config = self.load_config(source_directory)
        workspace = self.prepare(source_directory, config)
        return self._invoker.run(
            workspace.path,
            self._toolchain_path(config),
            config.toolchain.arguments,
            stdout=stdout,
            stderr=stderr,
        )

    def _toolchain_path(self, config: RunfConfig) -> str:
        return find_toolchain(config.toolchain.executable, environ=self._environ)


__all__ = ["Orchestrator"]
