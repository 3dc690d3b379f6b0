from __future__ import annotations

from typing import Callable

import pytest

from pytoolbox.tools.base import ToolContext
from pytoolbox.util.subprocess import CmdResult


class FakeRunner:
    """Records every argv it is asked to run and answers from a responder."""

    def __init__(self, responder: Callable[[list[str]], CmdResult] | None = None):
        self.calls: list[dict] = []
        self.responder = responder or (lambda argv: CmdResult(0, "", ""))

    def __call__(self, cmd, cwd=None, timeout=None, input_text=None) -> CmdResult:
        argv = list(cmd)
        self.calls.append({"argv": argv, "cwd": cwd, "input_text": input_text})
        return self.responder(argv)

    @property
    def argvs(self) -> list[list[str]]:
        return [c["argv"] for c in self.calls]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def project_dir(tmp_path):
    d = tmp_path / "myproj"
    d.mkdir()
    return d


@pytest.fixture
def ctx(project_dir):
    return ToolContext(cwd=str(project_dir), home="/home/tester")
