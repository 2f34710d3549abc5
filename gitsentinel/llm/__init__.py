from pathlib import Path

from gitsentinel.config import LLMConfig
from gitsentinel.llm.base import LLMProvider, LLMResponse
from gitsentinel.llm.claude import ClaudeProvider
from gitsentinel.llm.ollama import OllamaProvider


def build_provider(config: LLMConfig, cwd: str | Path = ".") -> LLMProvider | None:
    """Construct the configured provider, or None when disabled."""
    if config.provider == "ollama":
        return OllamaProvider(
            model=config.model or "llama3",
            hosts=list(config.hosts),
            timeout=config.timeout_seconds,
        )
    if config.provider == "claude":
        return ClaudeProvider(cwd=cwd, model=config.model, timeout=config.timeout_seconds)
    return None


__all__ = ["LLMProvider", "LLMResponse", "ClaudeProvider", "OllamaProvider", "build_provider"]
