import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any

from gitsentinel.llm.base import LLMProvider, LLMResponse

logger = logging.getLogger("gitsentinel.llm.ollama")


class OllamaProvider(LLMProvider):
    """LLM provider using the Ollama REST API with host failover."""

    name = "ollama"

    def __init__(self, model: str = "llama3", hosts: list[str] | None = None, timeout: int = 120):
        self.model = model
        self.hosts = hosts or ["http://localhost:11434"]
        self.timeout = timeout

    def invoke(self, prompt: str, **kwargs: Any) -> LLMResponse:
        """Invoke Ollama via API, trying hosts in configured order."""
        timeout = kwargs.get("timeout", self.timeout)
        start_time = time.time()

        last_error = ""
        for host in self.hosts:
            url = f"{host.rstrip('/')}/api/generate"
            payload = {
                "model": kwargs.get("model", self.model),
                "prompt": prompt,
                "stream": False,
                "options": kwargs.get("options", {}),
            }

            data = json.dumps(payload).encode("utf-8")
            req = urllib.request.Request(url, data=data, headers={"Content-Type": "application/json"})

            logger.info(f"Invoking Ollama ({payload['model']}) at {host}")

            try:
                with urllib.request.urlopen(req, timeout=timeout) as response:
                    resp_data = json.loads(response.read().decode("utf-8"))

                return LLMResponse(
                    success=True,
                    stdout=resp_data.get("response", ""),
                    stderr="",
                    exit_code=0,
                    duration_ms=int((time.time() - start_time) * 1000),
                    raw_response=resp_data,
                )
            except urllib.error.URLError as e:
                logger.warning(f"Ollama host {host} unreachable: {e}")
                last_error = f"Host {host} unreachable: {e}"
            except (TimeoutError, OSError, ValueError) as e:
                logger.warning(f"Ollama host {host} error: {e}")
                last_error = f"Host {host} error: {e}"

        return LLMResponse(
            success=False,
            stdout="",
            stderr=f"All Ollama hosts failed. Last error: {last_error}",
            exit_code=-1,
            duration_ms=int((time.time() - start_time) * 1000),
        )

    def check_health(self) -> dict[str, Any]:
        """Check if Ollama hosts are reachable and the model is available."""
        results = []
        for host in self.hosts:
            host_status: dict[str, Any] = {"host": host, "reachable": False, "models": []}
            try:
                with urllib.request.urlopen(f"{host.rstrip('/')}/api/tags", timeout=5) as response:
                    resp_data = json.loads(response.read().decode("utf-8"))
                host_status["reachable"] = True
                host_status["models"] = [m.get("name") for m in resp_data.get("models", [])]
                host_status["has_model"] = any(
                    m == self.model or m.startswith(f"{self.model}:") for m in host_status["models"]
                )
            except (urllib.error.URLError, TimeoutError, OSError, ValueError) as e:
                host_status["error"] = str(e)
            results.append(host_status)

        any_ok = any(r.get("reachable") and r.get("has_model") for r in results)
        return {
            "status": "ok" if any_ok else "error",
            "provider": self.name,
            "hosts": results,
            "target_model": self.model,
        }
