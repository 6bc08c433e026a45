"""Engine configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.models import AuditConfig

DEFAULT_GENERIC_BUCKET_CODES: tuple[str, ...] = (
    "3101001",
    "3101002",
    "3201001",
    "3201002",
    "3000000",
)


class EngineSettings(BaseSettings):
    """
    Defaults for every audit run.

    Values come from ``CLINIC_AUDIT_*`` environment variables when set
    (``CLINIC_AUDIT_GENERIC_BUCKET_CODES`` takes a JSON list). A
    per-audit ``AuditConfig`` overrides them through :meth:`merged_with`.
    """

    model_config = SettingsConfigDict(env_prefix="CLINIC_AUDIT_", extra="ignore")

    opacity_threshold: int = Field(default=60, ge=0)
    systemic_m3_fraction: float = Field(default=0.10, ge=0, le=1)
    generic_bucket_codes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GENERIC_BUCKET_CODES)
    )

    def merged_with(self, config: AuditConfig | None) -> "EngineSettings":
        """Return a copy with the non-empty fields of ``config`` applied."""
        if config is None:
            return self
        overrides = config.model_dump(exclude_none=True)
        if not overrides:
            return self
        return self.model_copy(update=overrides)

    def is_generic_bucket(self, code: str | None) -> bool:
        """True when ``code`` aggregates costs without itemized traceability."""
        return bool(code) and code.strip() in self.generic_bucket_codes
