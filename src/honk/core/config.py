"""
Core configuration
"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide engine configuration, read once at startup."""

    model_config = SettingsConfigDict(
        env_prefix="HONK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Template matching
    match_threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    match_scale_steps: int = Field(default=2, ge=0)
    templates_dir: str = "templates"
    # Re-match an unchanged frame only every (n + 1) polls while locating
    locate_unchanged_skip_max: int = Field(default=2, ge=0)

    # Region diff: fraction of zone pixels that must change, and per-channel noise floor
    diff_noise_threshold: float = Field(default=0.001, ge=0.0, le=1.0)
    diff_pixel_tolerance: int = Field(default=16, ge=0, le=255)

    # Timing (milliseconds)
    poll_interval_ms: int = Field(default=100, gt=0)
    verb_timeout_ms: int = Field(default=5000, gt=0)
    verify_window_ms: int = Field(default=1000, ge=0)
    hover_poll_ms: int = Field(default=100, gt=0)
    check_timeout_ms: int = Field(default=10000, gt=0)

    # Geometry
    check_zone_margin: int = Field(default=20, ge=0)
    absolute_check_size: int = Field(default=150, gt=0)
    screen_scale: float = Field(default=1.0, gt=0.0)
    capture_monitor: int = Field(default=1, ge=0)

    # Scrolling
    scroll_clicks: int = Field(default=3, gt=0)
    scroll_max_steps: int = Field(default=200, gt=0)
    scroll_stable_observations: int = Field(default=1, gt=0)

    # Keyboard
    type_interval_ms: int = Field(default=20, ge=0)
    submit_key: str = "enter"

    # Logging
    log_level: str = "INFO"
    log_path: str = "./logs"
    log_retention_days: int = 7
    log_console_enabled: bool = True
    log_file_enabled: bool = True

    # Failure diagnostics
    save_debug_images: bool = False
    debug_dir: str = "./debug"

    # OCR collaborator
    ocr_lang: str = "en"
    ocr_min_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    ocr_model_dir: Optional[str] = None

    @property
    def poll_interval(self) -> float:
        return self.poll_interval_ms / 1000.0

    @property
    def verb_timeout(self) -> float:
        return self.verb_timeout_ms / 1000.0

    @property
    def verify_window(self) -> float:
        return self.verify_window_ms / 1000.0

    @property
    def hover_poll(self) -> float:
        return self.hover_poll_ms / 1000.0

    @property
    def check_timeout(self) -> float:
        return self.check_timeout_ms / 1000.0

    @property
    def type_interval(self) -> float:
        return self.type_interval_ms / 1000.0


# Global settings instance
settings = Settings()
