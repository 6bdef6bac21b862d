"""
Note Agent Service Configuration
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Configuration settings for the Note Agent"""

    # Service Configuration
    SERVICE_NAME: str = "note-agent"
    LOG_LEVEL: str = "INFO"

    # Completion API Configuration
    # The API key is the user's JWT; it is normally passed to the runtime directly
    COMPLETION_API_KEY: Optional[str] = None
    COMPLETION_BASE_URL: str = "https://ai.aimoverse.xyz/api/v1.0.0"
    DEFAULT_MODEL: str = "aimo-chat"
    TEMPERATURE: float = 0.5
    MAX_TOKENS: int = 1000
    TOP_P: float = 0.95
    REQUEST_TIMEOUT_SECONDS: int = 30
    COMPLETION_MAX_RETRIES: int = 0

    # Conversation Configuration
    CONVERSATION_LOOK_BACK_LIMIT: int = 50
    CHAT_QUEUE_SIZE: int = 1
    # Must exceed REQUEST_TIMEOUT_SECONDS * (COMPLETION_MAX_RETRIES + 1) so completion
    # timeouts reach the caller as CompletionError
    CHAT_REPLY_TIMEOUT_SECONDS: int = 40

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
