from __future__ import annotations

import os
import shutil

import pytest

from fzf_harness import HarnessConfig, Session, TempChannel, WaitExceeded, load_config
from fzf_harness.tmux import TmuxClient


TMUX_AVAILABLE = shutil.which("tmux") is not None
BASH_AVAILABLE = shutil.which("bash") is not None
FZF_AVAILABLE = shutil.which("fzf") is not None


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    excinfo = call.excinfo
    if excinfo is not None and isinstance(excinfo.value, WaitExceeded):
        report.sections.append(("last captured screen", excinfo.value.format_screen()))


@pytest.fixture(scope="session")
def harness_config(tmp_path_factory) -> HarnessConfig:
    root = tmp_path_factory.mktemp("fzf_harness")
    return load_config().with_overrides(
        tmux_socket=f"fzf_harness_{os.getpid()}",
        capture_path=str(root / "fzf-test.txt"),
        output_path=str(root / "output"),
        init_file=str(root / "init.{shell}rc"),
    )


@pytest.fixture(scope="session")
def tmux_server(harness_config: HarnessConfig):
    if not TMUX_AVAILABLE:
        pytest.skip("tmux not available")
    client = TmuxClient(harness_config.tmux_socket, harness_config.tmux_binary)
    yield client
    client.kill_server()


@pytest.fixture
def tmux(tmux_server: TmuxClient, harness_config: HarnessConfig):
    if not BASH_AVAILABLE:
        pytest.skip("bash not available")
    session = Session("bash", config=harness_config, tmux=tmux_server)
    try:
        yield session
    finally:
        session.kill()


@pytest.fixture
def output(harness_config: HarnessConfig):
    channel = TempChannel(harness_config.output_path, harness_config.read_timeout)
    channel.drain()
    yield channel
    channel.drain()
