"""Pipeline stage names, in execution order."""

from __future__ import annotations

from enum import Enum


class Stage(str, Enum):
    """One step of the deployment pipeline."""

    VALIDATE = "validate"
    BUILD = "build"
    PUBLISH = "publish"
    DEPLOY = "deploy"
    WAIT = "wait"
    VERIFY = "verify"
    SMOKE_TEST = "smoke_test"
