from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

WIPO_BASE_URL = "https://branddb.wipo.int/branddb/en/"
RESULTS_URL_PATTERN = "**/similarname**"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    headless: bool = True
    browser_timeout: int = 30_000  # ms, page navigation
    retry_attempts: int = 3
    user_agent: str = DEFAULT_USER_AGENT
    viewport_width: int = 1920
    viewport_height: int = 1080
    log_level: Literal["debug", "info", "warn", "error"] = "info"

    # Empty key = direct formatting, no LLM calls
    anthropic_api_key: str = ""
    llm_model: str = "claude-haiku-4-5-20251001"
    llm_concurrency: int = 4

    fetch_details: bool = False
    screenshot_dir: str = ""

    database_url: str = "sqlite+aiosqlite:///./wipo_search.db"
    frontend_url: str = "http://localhost:3000"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_log_level(cls, value):
        return value.lower() if isinstance(value, str) else value

    def summary(self) -> dict:
        """Effective settings with the API key masked."""
        key = self.anthropic_api_key
        return {
            "headless": self.headless,
            "browser_timeout_ms": self.browser_timeout,
            "retry_attempts": self.retry_attempts,
            "user_agent": self.user_agent,
            "viewport": f"{self.viewport_width}x{self.viewport_height}",
            "log_level": self.log_level,
            "formatter": "assisted" if key else "direct",
            "anthropic_api_key": f"{key[:7]}..." if key else "",
            "llm_model": self.llm_model,
            "fetch_details": self.fetch_details,
            "screenshot_dir": self.screenshot_dir or None,
            "database_url": self.database_url,
        }


settings = Settings()
