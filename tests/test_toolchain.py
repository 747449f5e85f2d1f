"""Tests for runf.toolchain."""

from __future__ import annotations

import io
import os
import signal
import stat
import sys
from pathlib import Path

import pytest

from runf.errors import SpawnError
from runf.toolchain import (
    ToolchainInvoker,
    ToolchainResult,
    executable_filename,
    exit_status,
    find_toolchain,
)


def _make_executable(path: Path, content: str = "#!/bin/sh\nexit 0\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def test_executable_filename_per_platform() -> None:
    assert executable_filename("dotnet", platform="win32") == "dotnet.exe"
    assert executable_filename("dotnet.exe", platform="win32") == "dotnet.exe"
    assert executable_filename("dotnet", platform="linux") == "dotnet"


def test_find_toolchain_returns_first_match(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    _make_executable(second / "dotnet")
    _make_executable(tmp_path / "third" / "dotnet")
    search_path = ":".join([str(first), str(second), str(tmp_path / "third")])

    found = find_toolchain(environ={"PATH": search_path}, platform="linux")

    assert found == os.path.join(str(second), "dotnet")


def test_find_toolchain_uses_windows_conventions(tmp_path: Path) -> None:
    _make_executable(tmp_path / "bin" / "dotnet.exe")
    search_path = ";".join(["", str(tmp_path / "nothing"), str(tmp_path / "bin")])

    found = find_toolchain(environ={"PATH": search_path}, platform="win32", searchable=lambda d: True)

    assert found == os.path.join(str(tmp_path / "bin"), "dotnet.exe")


def test_find_toolchain_falls_back_to_bare_name(tmp_path: Path) -> None:
    assert find_toolchain(environ={"PATH": str(tmp_path)}, platform="linux") == "dotnet"
    assert find_toolchain(environ={}, platform="linux") == "dotnet"


def test_find_toolchain_skips_unsearchable_directories(tmp_path: Path) -> None:
    locked = tmp_path / "locked"
    open_dir = tmp_path / "open"
    _make_executable(locked / "dotnet")
    _make_executable(open_dir / "dotnet")
    seen = []

    def searchable(directory: str) -> bool:
        seen.append(directory)
        return directory != str(locked)

    found = find_toolchain(
        environ={"PATH": f"{locked}:{open_dir}"},
        platform="linux",
        searchable=searchable,
    )

    assert seen == [str(locked), str(open_dir)]
    assert found == os.path.join(str(open_dir), "dotnet")


def test_find_toolchain_keeps_explicit_paths() -> None:
    assert find_toolchain("/opt/dotnet/dotnet", environ={"PATH": ""}, platform="linux") == "/opt/dotnet/dotnet"


def test_invoker_relays_output_and_exit_code(tmp_path: Path) -> None:
    calls = []

    def runner(args, cwd):
        calls.append((list(args), cwd))
        return ToolchainResult(returncode=7, stdout="out", stderr="err")

    stdout, stderr = io.StringIO(), io.StringIO()
    code = ToolchainInvoker(runner=runner).run(tmp_path, "dotnet", stdout=stdout, stderr=stderr)

    assert code == 7
    assert calls == [(["dotnet", "run"], tmp_path)]
    assert stdout.getvalue() == "out\n"
    assert stderr.getvalue() == "err\n"


def test_invoker_writes_empty_streams(tmp_path: Path) -> None:
    stdout, stderr = io.StringIO(), io.StringIO()
    invoker = ToolchainInvoker(runner=lambda args, cwd: ToolchainResult(0, "", ""))

    assert invoker.run(tmp_path, "dotnet", ["run", "--", "x"], stdout=stdout, stderr=stderr) == 0
    assert stdout.getvalue() == "\n"
    assert stderr.getvalue() == "\n"


@pytest.mark.skipif(sys.platform.startswith("win"), reason="requires a POSIX shell")
def test_invoker_runs_stub_toolchain_in_workspace(tmp_path: Path) -> None:
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    stub = _make_executable(
        tmp_path / "bin" / "dotnet",
        '#!/bin/sh\necho out\necho err 1>&2\npwd > invoked_in.txt\necho "$1" > args.txt\nexit 7\n',
    )

    stdout, stderr = io.StringIO(), io.StringIO()
    code = ToolchainInvoker().run(workspace, str(stub), stdout=stdout, stderr=stderr)

    assert code == 7
    assert stdout.getvalue().strip() == "out"
    assert stderr.getvalue().strip() == "err"
    assert Path((workspace / "invoked_in.txt").read_text(encoding="utf-8").strip()).resolve() == workspace.resolve()
    assert (workspace / "args.txt").read_text(encoding="utf-8").strip() == "run"


def test_invoker_raises_spawn_error_for_missing_executable(tmp_path: Path) -> None:
    with pytest.raises(SpawnError) as excinfo:
        ToolchainInvoker().run(tmp_path, str(tmp_path / "no-such-dotnet"))

    assert "no-such-dotnet" in str(excinfo.value)


def test_exit_status_maps_signals_to_shell_convention() -> None:
    assert exit_status(0) == 0
    assert exit_status(7) == 7
    assert exit_status(-9) == 137
    assert exit_status(-15) == 143


@pytest.mark.skipif(sys.platform.startswith("win"), reason="requires POSIX signals")
def test_invoker_reports_signalled_toolchain_as_128_plus_signal(tmp_path: Path) -> None:
    stub = _make_executable(tmp_path / "bin" / "dotnet", "#!/bin/sh\nkill -TERM $$\n")

    code = ToolchainInvoker().run(tmp_path, str(stub), stdout=io.StringIO(), stderr=io.StringIO())

    assert code == 128 + signal.SIGTERM


@pytest.mark.skipif(
    sys.platform.startswith("win") or os.geteuid() == 0,
    reason="needs POSIX permissions enforced for a non-root user",
)
def test_find_toolchain_skips_directories_without_permissions(tmp_path: Path) -> None:
    locked = tmp_path / "locked"
    open_dir = tmp_path / "open"
    _make_executable(locked / "dotnet")
    _make_executable(open_dir / "dotnet")
    locked.chmod(0)
    try:
        found = find_toolchain(environ={"PATH": f"{locked}:{open_dir}"}, platform="linux")
    finally:
        locked.chmod(0o755)

    assert found == os.path.join(str(open_dir), "dotnet")
