"""Simulator configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Simulator settings loaded from environment variables."""

    # Skill identity stamped on every request envelope
    application_id: str = "amzn1.echo-sdk-ams.app.1c1a6dc3-6a63-4a7c-8b55-9b5e0e6a4f1d"
    user_id: str = "amzn1.ask.account.simulated"
    device_id: str = "amzn1.ask.device.simulated"
    locale: str = "en-US"
    protocol_version: str = "1.0"

    # Skill backend - a URL wins over a local handler
    skill_url: str | None = None
    skill_handler: str | None = None  # "package.module:function"
    request_timeout: float = 10.0

    # Device capabilities
    audio_player_enabled: bool = True

    debug: bool = False

    class Config:
        env_prefix = "SKILL_SIMULATOR_"
        env_file = ".env"
        case_sensitive = False


settings = Settings()
