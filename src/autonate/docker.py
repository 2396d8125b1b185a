"""
Docker CLI wrapper and per-agent Dockerfile template.

Build, tag, push and registry login are shelled out to the docker
binary. The exit status is the only signal consulted; output is
captured so it can be attached to the stage error on failure.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import List, Optional

logger = logging.getLogger(__name__)

_NOT_FOUND_EXIT = 127


def render_dockerfile(agent_id: str) -> str:
    """Generate the Dockerfile for one agent.

    Args:
        agent_id: Agent identifier (e.g. 'route-oracle').

    Returns:
        Dockerfile text with the agent id and fixed runtime markers baked in.
    """
    return f"""FROM node:20-alpine

# Install dependencies
RUN apk add --no-cache python3 make g++

WORKDIR /app

# Copy package files
COPY package*.json ./
RUN npm ci --only=production

# Copy agent code
COPY ./agents/{agent_id} ./agents/{agent_id}
COPY ./shared ./shared
COPY ./characters ./characters
COPY ./plugins ./plugins

# Set agent-specific environment
ENV AGENT_ID={agent_id}
ENV NODE_ENV=production
ENV LIBERATION_MODE=enabled

# Health check endpoint
HEALTHCHECK --interval=30s --timeout=10s --start-period=5s --retries=3 \\
  CMD node healthcheck.js

# Run the agent
CMD ["node", "start-agent.js"]
"""


def _tail(text: str, lines: int = 20) -> str:
    """Return the last N lines of command output."""
    return "\n".join(text.strip().splitlines()[-lines:])


class DockerCLI:
    """Run docker commands and report their exit status.

    Args:
        binary: Name or path of the docker executable.
    """

    def __init__(self, binary: str = "docker") -> None:
        self._binary = binary

    @property
    def available(self) -> bool:
        """Whether the docker binary is on PATH."""
        return shutil.which(self._binary) is not None

    def run(self, args: List[str], stdin: Optional[str] = None) -> subprocess.CompletedProcess:
        """Run ``docker <args>`` and capture output.

        A missing binary is reported as exit status 127 rather than an
        exception so callers only ever look at ``returncode``.

        Args:
            args: Arguments after the docker binary.
            stdin: Text fed to the process on stdin.

        Returns:
            The completed process.
        """
        cmd = [self._binary, *args]
        logger.debug("Running: %s", " ".join(cmd[:3]))
        try:
            proc = subprocess.run(
                cmd,
                input=stdin,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            return subprocess.CompletedProcess(
                cmd, _NOT_FOUND_EXIT, "", f"{self._binary}: command not found",
            )

        if proc.returncode != 0:
            logger.warning(
                "%s exited %d: %s", " ".join(cmd[:2]), proc.returncode,
                _tail(proc.stderr or proc.stdout or ""),
            )
        return proc

    def build(self, tag: str, context: str) -> subprocess.CompletedProcess:
        """docker build -t <tag> <context>"""
        return self.run(["build", "-t", tag, context])

    def login(self, registry: str, username: str, token: str) -> subprocess.CompletedProcess:
        """Log in with the token on stdin so it never appears in argv."""
        return self.run(
            ["login", registry, "-u", username, "--password-stdin"],
            stdin=token,
        )

    def tag(self, source: str, target: str) -> subprocess.CompletedProcess:
        """docker tag <source> <target>"""
        return self.run(["tag", source, target])

    def push(self, ref: str) -> subprocess.CompletedProcess:
        """docker push <ref>"""
        return self.run(["push", ref])


def failure_reason(proc: subprocess.CompletedProcess) -> str:
    """Summarize a failed docker invocation for an error message."""
    output = _tail(proc.stderr or proc.stdout or "", 5)
    return f"exit {proc.returncode}" + (f": {output}" if output else "")
