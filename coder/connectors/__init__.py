from __future__ import annotations

import importlib

from coder.connectors.base import LLMConnector
from coder.errors import ConfigError

CONNECTOR_MAP: dict[str, str] = {
    "anthropic": "coder.connectors.anthropic.AnthropicConnector",
    "ollama": "coder.connectors.ollama.OllamaConnector",
}


def get_connector(name: str, model: str, max_tokens: int = 1024) -> LLMConnector:
    """Factory: resolve connector name to class and instantiate."""
    if name not in CONNECTOR_MAP:
        raise ConfigError(f"Unknown connector '{name}'. Available: {list(CONNECTOR_MAP)}")
    module_path, class_name = CONNECTOR_MAP[name].rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls(model=model, max_tokens=max_tokens)
