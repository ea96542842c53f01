"""Configuration management for SalesNote Engine."""

from pydantic_settings import BaseSettings, SettingsConfigDict

MB = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    ENV: str = "local"
    SERVICE_NAME: str = "salesnote-engine"
    SERVICE_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # OpenAI Configuration (speech-to-text and minutes generation)
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str | None = None
    TRANSCRIPTION_MODEL: str = "whisper-1"
    TRANSCRIPTION_LANGUAGE: str = "ja"
    MINUTES_MODEL: str = "gpt-4o-mini"
    LLM_ENABLED: bool = True

    # Chunked Transcription Configuration
    TRANSCRIPTION_SIZE_THRESHOLD_MB: int = 25  # Hard request limit of the speech-to-text API
    CHUNK_TARGET_MB: int = 20  # Headroom below the limit for WAV re-encoding
    MIN_CHUNK_SECONDS: float = 30.0
    MAX_CHUNK_SECONDS: float = 600.0
    TRANSCRIPTION_BATCH_SIZE: int = 10  # Concurrent in-flight requests per batch
    TRANSCRIPTION_MAX_ATTEMPTS: int = 1  # 1 = fail fast, no retry
    TRANSCRIPTION_TIMEOUT_SECONDS: float | None = None  # None = wait indefinitely
    FFMPEG_TIMEOUT_SECONDS: int = 300

    # Upload Constraints
    MAX_UPLOAD_MB: int = 200

    # Object Storage Configuration
    STORAGE_BACKEND: str = "local"  # "gcs" or "local"
    GCP_PROJECT_ID: str = ""
    GCS_BUCKET_NAME: str = ""
    LOCAL_STORAGE_PATH: str = "data/objects"
    SIGNED_URL_EXPIRATION_SECONDS: int = 3600

    @property
    def transcription_size_threshold_bytes(self) -> int:
        """Convert TRANSCRIPTION_SIZE_THRESHOLD_MB to bytes."""
        return self.TRANSCRIPTION_SIZE_THRESHOLD_MB * MB

    @property
    def chunk_target_bytes(self) -> int:
        """Convert CHUNK_TARGET_MB to bytes."""
        return self.CHUNK_TARGET_MB * MB

    @property
    def max_upload_bytes(self) -> int:
        """Convert MAX_UPLOAD_MB to bytes."""
        return self.MAX_UPLOAD_MB * MB


# Singleton settings instance
settings = Settings()
