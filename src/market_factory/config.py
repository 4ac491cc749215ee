import os

from pydantic import BaseModel


class ConfigurationError(RuntimeError):
    pass


class ModelConfig(BaseModel):
    default_model: str = "gpt-4"
    temperature: float = 0.7
    max_tokens: int = 2000
    api_key_env: str = "OPENAI_API_KEY"
    app_name: str = "market-factory"
    user_id: str = "market-creator"


API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"


def ensure_api_key(model_config: ModelConfig) -> str:
    api_key = os.environ.get(model_config.api_key_env, "").strip()
    if not api_key or api_key == API_KEY_PLACEHOLDER:
        raise ConfigurationError(
            f"OpenAI API key not configured. Please add {model_config.api_key_env} "
            "to your environment."
        )
    return api_key


config = ModelConfig()
