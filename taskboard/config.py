"""Service configuration read from the environment (and a local .env file)."""

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Service settings."""
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    seed_demo_data: bool = True
    reminders_enabled: bool = True
    reminder_interval_seconds: float = 60.0
    reminder_lead_minutes: int = 30
    reminder_dedupe_minutes: int = 15

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            seed_demo_data=_env_bool("SEED_DEMO_DATA", True),
            reminders_enabled=_env_bool("REMINDERS_ENABLED", True),
            reminder_interval_seconds=float(os.getenv("REMINDER_INTERVAL_SECONDS", "60")),
            reminder_lead_minutes=int(os.getenv("REMINDER_LEAD_MINUTES", "30")),
            reminder_dedupe_minutes=int(os.getenv("REMINDER_DEDUPE_MINUTES", "15")),
        )


settings = Settings.from_env()
