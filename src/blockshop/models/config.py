"""Configuration models for Blockshop."""

from pydantic import BaseModel, Field, HttpUrl
from pathlib import Path
import yaml
import os
import stat


DEFAULT_CONFIG_PATH = Path.home() / ".config" / "blockshop" / "config.yaml"


class LLMConfig(BaseModel):
    """Configuration for LLM API connection."""

    endpoint: HttpUrl = Field(
        ...,
        description="LLM API endpoint URL (OpenAI or Ollama compatible)"
    )

    api_key: str = Field(
        ...,
        description="API key for authentication"
    )

    model: str = Field(
        ...,
        description="Model identifier (e.g., 'gpt-4o-mini', 'llama3')"
    )

    num_ctx: int = Field(
        default=32768,
        ge=1024,
        description="Context window size (Ollama-specific, controls VRAM usage)"
    )

    model_config = {"frozen": True}


class RewriteConfig(BaseModel):
    """Configuration for block rewrite requests."""

    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for rewrites"
    )

    max_retries: int = Field(
        default=1,
        ge=0,
        le=5,
        description="Automatic retries on connection errors and timeouts"
    )

    retry_delay: float = Field(
        default=2.0,
        ge=0.0,
        description="Seconds to wait between retries"
    )

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for the Blockshop application."""

    llm: LLMConfig = Field(..., description="LLM API settings")
    rewrite: RewriteConfig = Field(default_factory=RewriteConfig, description="Rewrite settings")

    @classmethod
    def load(cls, path: Path = DEFAULT_CONFIG_PATH) -> "Config":
        """
        Load configuration from YAML file.

        Validates file permissions before loading, since the file holds an API key.

        Args:
            path: Path to config.yaml file

        Returns:
            Validated Config instance

        Raises:
            PermissionError: If file is group/world readable
            FileNotFoundError: If config file doesn't exist
            ValueError: If YAML is invalid or validation fails
        """
        if not path.exists():
            raise FileNotFoundError(
                f"Configuration file not found at {path}\n\n"
                f"Please create the file with the following format:\n\n"
                f"llm:\n"
                f"  endpoint: https://api.openai.com/v1\n"
                f"  api_key: YOUR_API_KEY_HERE\n"
                f"  model: gpt-4o-mini\n\n"
                f"rewrite:\n"
                f"  temperature: 0.7\n"
            )

        mode = os.stat(path).st_mode
        if mode & (stat.S_IRWXG | stat.S_IRWXO):
            raise PermissionError(
                f"Config file has overly permissive permissions: {oct(mode)}\n"
                f"Run: chmod 600 {path}"
            )

        with open(path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a YAML mapping")

        return cls(**data)

    model_config = {"frozen": True}
