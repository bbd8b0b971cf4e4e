from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from react_loop.errors import ConfigError

MODEL_ENV = "DASH_SCOPE_MODEL"
BASE_URL_ENV = "DASH_SCOPE_URL"
API_KEY_ENV = "DASH_SCOPE_API_KEY"


class LLMConfig(BaseModel):
    provider: str = "openai"
    model: str
    base_url: Optional[str] = None
    api_key_env: str = API_KEY_ENV
    temperature: Optional[float] = None
    timeout_s: float = 60.0
    max_retries: int = 2

    def api_key(self) -> Optional[str]:
        return os.environ.get(self.api_key_env)


class WorkflowConfig(BaseModel):
    max_iterations: int = Field(5, ge=1)
    append_unparsed_replies: bool = False
    on_model_error: Literal["degrade", "abort"] = "degrade"
    pass_tool_catalogue: bool = False


class WeatherToolConfig(BaseModel):
    timeout_s: float = 30.0


class ToolsConfig(BaseModel):
    weather: WeatherToolConfig = WeatherToolConfig()


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    llm: LLMConfig
    workflow: WorkflowConfig = WorkflowConfig()
    tools: ToolsConfig = ToolsConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(env: str = "base", config_dir: str | Path = "configs") -> AppConfig:
    config_dir = Path(config_dir)
    base = _read_yaml(config_dir / "base.yaml")
    if env != "base":
        override_path = config_dir / f"{env}.yaml"
        if override_path.exists():
            base = _merge_dicts(base, _read_yaml(override_path))
    base = _apply_env_overrides(base)
    try:
        return AppConfig(**base)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration in {config_dir}: {exc}") from exc


def _apply_env_overrides(raw: Dict[str, Any]) -> Dict[str, Any]:
    llm = dict(raw.get("llm") or {})
    if os.environ.get(MODEL_ENV):
        llm["model"] = os.environ[MODEL_ENV]
    if os.environ.get(BASE_URL_ENV):
        llm["base_url"] = os.environ[BASE_URL_ENV]
    merged = dict(raw)
    merged["llm"] = llm
    return merged


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merged[key] = _merge_dicts(base[key], value)
        else:
            merged[key] = value
    return merged
