"""
Tests for engine settings.
"""

import pytest
from pydantic import ValidationError

from clinic_audit import AuditConfig, EngineSettings


class TestEngineSettings:
    """Tests for EngineSettings."""

    def test_defaults(self) -> None:
        """Test default thresholds and bucket codes."""
        settings = EngineSettings()

        assert settings.opacity_threshold == 60
        assert settings.systemic_m3_fraction == pytest.approx(0.10)
        assert settings.generic_bucket_codes == [
            "3101001",
            "3101002",
            "3201001",
            "3201002",
            "3000000",
        ]

    def test_environment_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a JSON list read from the environment."""
        monkeypatch.setenv("CLINIC_AUDIT_GENERIC_BUCKET_CODES", '["9990001"]')
        assert EngineSettings().generic_bucket_codes == ["9990001"]

    def test_negative_threshold_rejected(self) -> None:
        """Test threshold validation."""
        with pytest.raises(ValidationError):
            EngineSettings(opacity_threshold=-1)

    def test_merged_with_overrides_only_given_fields(self) -> None:
        """Test that unset config fields keep the base value."""
        base = EngineSettings()
        merged = base.merged_with(AuditConfig(opacity_threshold=45))

        assert merged.opacity_threshold == 45
        assert merged.systemic_m3_fraction == base.systemic_m3_fraction
        assert base.opacity_threshold == 60

    def test_merged_with_none(self) -> None:
        """Test that no config returns the same settings."""
        base = EngineSettings()
        assert base.merged_with(None) is base
        assert base.merged_with(AuditConfig()) is base

    @pytest.mark.parametrize(
        ("code", "expected"),
        [("3201001", True), (" 3101002 ", True), ("1100099", False), (None, False), ("", False)],
    )
    def test_is_generic_bucket(self, code: str | None, expected: bool) -> None:
        """Test generic bucket membership."""
        assert EngineSettings().is_generic_bucket(code) is expected
