"""
Test suite for the Report Extractor.

Run with: pytest tests/test_extractor.py -v
"""
from __future__ import annotations

from console_qa.reporting.extractor import (
    collect_attempts,
    dedupe_outcomes,
    extract_outcomes,
    module_key,
    module_label,
)

from tests.conftest import make_report, make_result, make_spec


class TestModuleKey:
    """Module keys derived from source files."""

    def test_spec_file(self):
        assert module_key("api-keys.spec.ts") == "api-keys"

    def test_nested_spec_file(self):
        assert module_key("tests/billing.spec.ts") == "billing"

    def test_windows_separators(self):
        assert module_key("tests\\contact-us.spec.ts") == "contact-us"

    def test_python_test_module(self):
        assert module_key("tests/e2e/test_api_keys.py") == "api-keys"
        assert module_key("tests/e2e/test_z_logout.py") == "z-logout"

    def test_labels(self):
        assert module_label("api-keys") == "API Keys"
        assert module_label("z-logout") == "Logout"
        assert module_label("unknown-module") == "unknown-module"


class TestExtraction:
    """Test suite for flattening nested reports."""

    def test_nested_suites_are_walked(self, mixed_report):
        outcomes = extract_outcomes(mixed_report)

        assert [o.test_id for o in outcomes] == ["TC_API_01", "TC_BILL_02", "TC_SET_03"]
        assert [o.status for o in outcomes] == ["passed", "failed", "skipped"]

    def test_outcome_fields(self, mixed_report):
        failed = extract_outcomes(mixed_report)[1]

        assert failed.name == "Verify plans heading"
        assert failed.module == "billing"
        assert failed.module_label == "Billing"
        assert failed.duration_ms == 3000
        assert failed.error.startswith("Timeout 30000ms exceeded.")

    def test_retry_keeps_last_attempt(self, retried_report):
        outcomes = extract_outcomes(retried_report)

        assert len(outcomes) == 1
        assert outcomes[0].status == "passed"
        assert outcomes[0].error == ""

    def test_retry_keeps_highest_attempt_regardless_of_order(self):
        spec = make_spec(
            "TC_USE_01 - Balance",
            "usage.spec.ts",
            make_result("passed", retry=1),
            make_result("failed", retry=0, error="boom"),
        )
        outcomes = extract_outcomes(make_report(spec))
        assert outcomes[0].status == "passed"

    def test_auth_setup_is_excluded(self):
        report = make_report(
            make_spec("authenticate", "auth.setup.ts"),
            make_spec("TC_DASH_01 - Heading", "dashboard.spec.ts"),
        )
        outcomes = extract_outcomes(report)
        assert [o.title for o in outcomes] == ["TC_DASH_01 - Heading"]

    def test_same_title_in_different_files_is_kept(self):
        report = make_report(
            make_spec("TC_X_01 - Shared", "a.spec.ts"),
            make_spec("TC_X_01 - Shared", "b.spec.ts"),
        )
        assert len(extract_outcomes(report)) == 2

    def test_error_messages_joined_and_capped(self):
        result = make_result("failed")
        result["errors"] = [{"message": "a" * 300}, {"message": "b" * 300}]
        outcome = extract_outcomes(make_report(make_spec("TC_A_01 - x", "a.spec.ts", result)))[0]

        assert len(outcome.error) == 500
        assert "\n" in outcome.error

    def test_attachments_keep_base_name(self):
        result = make_result(
            "failed",
            attachments=[{"name": "screenshot", "path": "C:\\results\\run\\shot.png", "contentType": "image/png"}],
        )
        outcome = extract_outcomes(make_report(make_spec("TC_A_01 - x", "a.spec.ts", result)))[0]

        assert outcome.attachments[0].relative_path == "shot.png"
        assert outcome.attachments[0].content_type == "image/png"

    def test_negative_duration_is_clamped(self):
        outcome = extract_outcomes(
            make_report(make_spec("TC_A_01 - x", "a.spec.ts", make_result(duration=-5)))
        )[0]
        assert outcome.duration_ms == 0

    def test_empty_report(self):
        assert extract_outcomes({}) == []

    def test_collect_then_dedupe(self, retried_report):
        attempts = collect_attempts(retried_report)
        assert len(attempts) == 2
        assert len(dedupe_outcomes(attempts)) == 1

    def test_retry_never_serialized(self, mixed_report):
        dumped = extract_outcomes(mixed_report)[0].model_dump(by_alias=True)
        assert "retry" not in dumped
        assert dumped["id"] == "TC_API_01"
