from pathlib import Path

import pytest

from zedpack.errors import ToolchainError
from zedpack.stages import RustupProvisioner


def test_ensure_adds_missing_target(toolchain) -> None:
    added = RustupProvisioner().ensure("wasm32-wasip1")

    assert added is True
    assert "wasm32-wasip1" in toolchain.installed
    assert toolchain.commands(("rustup", "target", "add")) == [
        ("rustup", "target", "add", "wasm32-wasip1")
    ]


def test_ensure_is_idempotent(toolchain) -> None:
    provisioner = RustupProvisioner()

    first = provisioner.ensure("wasm32-wasip1")
    second = provisioner.ensure("wasm32-wasip1")

    assert (first, second) == (True, False)
    assert len(toolchain.commands(("rustup", "target", "add"))) == 1
    assert toolchain.installed == {"x86_64-unknown-linux-gnu", "wasm32-wasip1"}


def test_ensure_skips_already_installed_target(toolchain) -> None:
    toolchain.installed.add("wasm32-wasip1")

    assert RustupProvisioner().ensure("wasm32-wasip1") is False
    assert toolchain.commands(("rustup", "target", "add")) == []


def test_failed_add_raises_toolchain_error_with_diagnostics(toolchain) -> None:
    toolchain.failures["rustup target add"] = (
        1,
        "error: toolchain 'stable' does not support target 'wasm64-nope'\n",
    )

    with pytest.raises(ToolchainError) as excinfo:
        RustupProvisioner().ensure("wasm64-nope")

    error = excinfo.value
    assert error.code == "E_TOOLCHAIN"
    assert error.returncode == 1
    assert "does not support target 'wasm64-nope'" in error.diagnostics
    assert error.context["target"] == "wasm64-nope"
    assert error.context["command"] == "rustup target add wasm64-nope"


def test_failed_listing_raises_before_adding(toolchain) -> None:
    toolchain.failures["rustup target list"] = (1, "error: no default toolchain configured\n")

    with pytest.raises(ToolchainError, match="list installed"):
        RustupProvisioner().ensure("wasm32-wasip1")

    assert toolchain.commands(("rustup", "target", "add")) == []


def test_missing_rustup_is_reported_with_install_hint(toolchain) -> None:
    toolchain.missing.add("rustup")

    with pytest.raises(ToolchainError) as excinfo:
        RustupProvisioner().ensure("wasm32-wasip1")

    assert excinfo.value.returncode == 127
    assert excinfo.value.hint is not None
    assert "rustup.rs" in excinfo.value.hint


def test_custom_rustup_executable_is_used(toolchain) -> None:
    RustupProvisioner(tool="/opt/rust/bin/rustup").ensure("wasm32-wasip1")

    assert toolchain.calls[0][0] == "/opt/rust/bin/rustup"


def test_ensure_passes_the_working_directory_to_rustup(toolchain, tmp_path: Path) -> None:
    RustupProvisioner().ensure("wasm32-wasip1", cwd=tmp_path)

    assert toolchain.cwds == [str(tmp_path), str(tmp_path)]
