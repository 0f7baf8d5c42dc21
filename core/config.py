"""Configuration settings for the agent catalog."""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


class PromptConfig(BaseModel):
    """Configuration for prompt management."""

    # Enable prompt caching
    cache_prompts: bool = Field(
        default=True,
        description="Whether to cache prompts after loading"
    )

    use_langsmith: bool = Field(
        default=False,
        description="Pull prompts from LangSmith before falling back to local templates"
    )


class ModelConfig(BaseModel):
    """Configuration for a single LLM call."""
    provider: str = Field(
        default="groq",
        description="LLM provider (groq, gemini or openai)"
    )

    model_name: str = Field(
        default="openai/gpt-oss-120b",
        description="Model name to use"
    )

    temperature: float = Field(
        default=0.2,
        description="Temperature for model responses"
    )

    max_tokens: int = Field(
        default=1000,
        description="Maximum tokens for responses"
    )


class ProviderConfig(BaseModel):
    """API keys for the LLM providers."""
    groq_api_key: str = Field(
        default_factory=lambda: os.getenv("GROQ_API_KEY", ""),
        description="Groq API key"
    )

    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", ""),
        description="Google Gemini API key"
    )

    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="OpenAI API key (chat, Whisper, TTS and images)"
    )


class SMTPConfig(BaseModel):
    """Configuration for outgoing email."""
    host: str = Field(default_factory=lambda: os.getenv("SMTP_HOST", ""))
    port: int = Field(default_factory=lambda: int(os.getenv("SMTP_PORT", "587")))
    user: str = Field(default_factory=lambda: os.getenv("SMTP_USER", ""))
    password: str = Field(default_factory=lambda: os.getenv("SMTP_PASS", ""))
    sender: str = Field(default_factory=lambda: os.getenv("SMTP_FROM", ""))
    secure: bool = Field(
        default_factory=lambda: os.getenv("SMTP_SECURE", "false").lower() == "true",
        description="Use implicit TLS instead of STARTTLS"
    )

    @property
    def configured(self) -> bool:
        return bool(self.host and self.user and self.password)


class YouTubeConfig(BaseModel):
    """Configuration for the YouTube Data API."""
    api_key: str = Field(default_factory=lambda: os.getenv("YOUTUBE_API_KEY", ""))
    base_url: str = Field(default="https://www.googleapis.com/youtube/v3")


class KnowledgeBaseConfig(BaseModel):
    """Configuration for the in-memory knowledge store."""
    chunk_size: int = Field(
        default=1000,
        description="Words per chunk"
    )

    top_k: int = Field(
        default=5,
        description="Chunks returned per query"
    )

    similarity_threshold: float = Field(
        default=0.1,
        description="Minimum word-overlap score for a chunk to match"
    )

    max_documents: Optional[int] = Field(
        default=None,
        description="Evict the oldest documents past this count (None keeps everything)"
    )


class AgentConfig(BaseModel):
    """Configuration for agent behavior."""
    max_audio_bytes: int = Field(
        default=25 * 1024 * 1024,
        description="Largest audio file accepted for transcription"
    )

    output_dir: str = Field(
        default_factory=lambda: os.getenv("AGENT_OUTPUT_DIR", "outputs"),
        description="Directory for generated files (speech, cleaned data)"
    )


class CatalogConfig(BaseModel):
    """Main configuration for the agent catalog."""
    prompts: PromptConfig = Field(
        default_factory=PromptConfig,
        description="Prompt configuration"
    )

    providers: ProviderConfig = Field(
        default_factory=ProviderConfig,
        description="LLM provider keys"
    )

    smtp: SMTPConfig = Field(
        default_factory=SMTPConfig,
        description="SMTP configuration"
    )

    youtube: YouTubeConfig = Field(
        default_factory=YouTubeConfig,
        description="YouTube configuration"
    )

    knowledge_base: KnowledgeBaseConfig = Field(
        default_factory=KnowledgeBaseConfig,
        description="Knowledge base configuration"
    )

    agents: AgentConfig = Field(
        default_factory=AgentConfig,
        description="Agent configuration"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    @classmethod
    def from_env(cls) -> "CatalogConfig":
        """Create config from environment variables."""
        return cls(
            prompts=PromptConfig(
                cache_prompts=os.getenv("CACHE_PROMPTS", "true").lower() == "true",
                use_langsmith=os.getenv("PROMPTS_FROM_LANGSMITH", "false").lower() == "true"
            ),
            knowledge_base=KnowledgeBaseConfig(
                chunk_size=int(os.getenv("KB_CHUNK_SIZE", "1000")),
                top_k=int(os.getenv("KB_TOP_K", "5")),
                similarity_threshold=float(os.getenv("KB_SIMILARITY_THRESHOLD", "0.1")),
                max_documents=_optional_int("KB_MAX_DOCUMENTS")
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper()
        )


# Global config instance
config = CatalogConfig.from_env()
