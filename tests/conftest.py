"""Shared test fixtures for autonate."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Dict

import pytest
import requests

from autonate.config import DeploymentConfig, load_config
from autonate.pipeline.validate import REQUIRED_ENV_VARS


def make_response(status: int = 200, json_data: Any = None, text: str = "") -> requests.Response:
    """Build a real requests.Response with a JSON or text body."""
    resp = requests.Response()
    resp.status_code = status
    resp.encoding = "utf-8"
    body = json.dumps(json_data) if json_data is not None else text
    resp._content = body.encode("utf-8")
    return resp


def completed(returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    """Build a CompletedProcess for mocked docker calls."""
    return subprocess.CompletedProcess(["docker"], returncode, "", stderr)


class FakeClock:
    """Simulated monotonic time; sleeping advances it instantly."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def full_environ() -> Dict[str, str]:
    """An environment with every required credential set."""
    env = {name: f"test-{name.lower()}" for name in REQUIRED_ENV_VARS}
    env["COMPUTE3_API_KEY"] = "c3-secret"
    return env


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    """A minimal deployment manifest on disk."""
    path = tmp_path / "compute3-deploy.yaml"
    path.write_text("name: Autonate Liberation Force\nagents: []\n", encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path: Path, full_environ: Dict[str, str], manifest_file: Path) -> DeploymentConfig:
    """A config rooted in a temp directory."""
    return load_config(
        full_environ,
        manifest_path=manifest_file,
        build_root=tmp_path / "build",
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
