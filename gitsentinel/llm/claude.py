import logging
import shutil
import subprocess
import time
from pathlib import Path
from typing import Any

from gitsentinel.llm.base import LLMProvider, LLMResponse

logger = logging.getLogger("gitsentinel.llm.claude")

CLAUDE_CLI_COMMAND = "claude"


class ClaudeProvider(LLMProvider):
    """LLM provider using the Claude CLI in print mode."""

    name = "claude"

    def __init__(self, cwd: str | Path = ".", model: str | None = None, timeout: int = 120):
        self.cwd = Path(cwd)
        self.model = model
        self.timeout = timeout

    def invoke(self, prompt: str, **kwargs: Any) -> LLMResponse:
        """Invoke the CLI with the prompt as a single non-interactive turn."""
        timeout = kwargs.get("timeout", self.timeout)
        cmd = [CLAUDE_CLI_COMMAND, "--print"]
        if self.model:
            cmd += ["--model", self.model]
        cmd.append(prompt)

        logger.info("Invoking Claude CLI")
        start_time = time.time()

        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.cwd),
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return LLMResponse(
                success=False,
                stdout="",
                stderr=f"Claude CLI invocation timed out after {timeout}s",
                exit_code=-1,
                duration_ms=int((time.time() - start_time) * 1000),
            )
        except FileNotFoundError:
            return LLMResponse(
                success=False,
                stdout="",
                stderr=f"{CLAUDE_CLI_COMMAND} command not found",
                exit_code=-1,
                duration_ms=int((time.time() - start_time) * 1000),
            )

        return LLMResponse(
            success=result.returncode == 0,
            stdout=result.stdout,
            stderr=result.stderr,
            exit_code=result.returncode,
            duration_ms=int((time.time() - start_time) * 1000),
            raw_response=result,
        )

    def check_health(self) -> dict[str, Any]:
        """Report whether the CLI binary is on PATH."""
        path = shutil.which(CLAUDE_CLI_COMMAND)
        return {
            "status": "ok" if path else "error",
            "provider": self.name,
            "binary": path,
        }
