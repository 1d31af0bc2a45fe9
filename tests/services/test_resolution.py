"""Tests for SettingsResolver — tiered settings file resolution."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from tests.conftest import make_user_config
from ucmigrate.config.models import MigrationOptions
from ucmigrate.domain.errors import InvalidArgumentError
from ucmigrate.domain.identity import Identity, ScanTarget
from ucmigrate.domain.naming import ExtensionVariant
from ucmigrate.domain.versions import SemanticVersion
from ucmigrate.infrastructure.scanner import ResolvedSettingsFile, scan
from ucmigrate.services.resolution import SettingsResolver, variant_targets

V2 = SemanticVersion.parse("2.0.0.0")
CURRENT = Identity.from_assembly_dir("Acme", "App.exe_Url_abc123")


class RecordingScanner:
    """Scanner double recording every call, delegating to the real scan."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    def __call__(
        self,
        app_data_root: Path,
        targets: list[ScanTarget],
        current_version: SemanticVersion,
        **kwargs: Any,
    ) -> ResolvedSettingsFile | None:
        self.calls.append({"targets": list(targets), **kwargs})
        return scan(app_data_root, targets, current_version, **kwargs)


@pytest.fixture
def recorder() -> RecordingScanner:
    return RecordingScanner()


class TestExactTier:
    def test_end_to_end_scenario(self, app_data_root: Path) -> None:
        make_user_config(app_data_root, "Acme", "App.exe_Url_abc123", "1.5.0.0")
        expected = make_user_config(app_data_root, "Acme", "App.exe_Url_abc123", "1.9.0.0")

        found = SettingsResolver().resolve(V2, CURRENT, app_data_root)
        assert found is not None
        assert found.path == expected
        assert str(found.version) == "1.9.0.0"

    def test_hint_short_circuits(self, app_data_root: Path, recorder: RecordingScanner) -> None:
        make_user_config(app_data_root, "Acme", "App.exe_Url_abc123", "1.0.0.0")
        # A higher candidate reachable only through the fallback tiers.
        make_user_config(app_data_root, "Acme", "App.exe_Url_other", "1.9.0.0")

        options = MigrationOptions(previous_identities=(Identity("OldCo", "OldApp"),))
        found = SettingsResolver(recorder).resolve(V2, CURRENT, app_data_root, options)

        assert found is not None and str(found.version) == "1.0.0.0"
        assert len(recorder.calls) == 1
        assert recorder.calls[0]["targets"] == [ScanTarget("Acme", "App.exe_Url_abc123")]
        assert recorder.calls[0]["accept_same"] is False

    def test_no_hint_skips_exact_tier(
        self, app_data_root: Path, recorder: RecordingScanner
    ) -> None:
        SettingsResolver(recorder).resolve(V2, Identity("Acme", "App"), app_data_root)
        # Only the extensionless tier runs, once per acceptance setting.
        assert len(recorder.calls) == 2
        assert [call["accept_same"] for call in recorder.calls] == [False, True]
        assert all(call["exclude_dirs"] == () for call in recorder.calls)


class TestFallbackTiers:
    def test_relocated_install_found_by_prefix(self, app_data_root: Path) -> None:
        expected = make_user_config(app_data_root, "Acme", "App.exe_Url_oldhash", "1.4.0.0")
        found = SettingsResolver().resolve(V2, CURRENT, app_data_root)
        assert found is not None and found.path == expected

    def test_same_version_relocated_install(self, app_data_root: Path) -> None:
        expected = make_user_config(app_data_root, "Acme", "App.exe_Url_oldhash", "2.0.0.0")
        found = SettingsResolver().resolve(V2, CURRENT, app_data_root)
        assert found is not None and found.path == expected

    def test_exact_dir_not_revisited_with_same_version(self, app_data_root: Path) -> None:
        make_user_config(app_data_root, "Acme", "App.exe_Url_abc123", "2.0.0.0")
        assert SettingsResolver().resolve(V2, CURRENT, app_data_root) is None

    def test_lower_version_preferred_over_same_version(self, app_data_root: Path) -> None:
        make_user_config(app_data_root, "Acme", "App.exe_Url_old1", "2.0.0.0")
        expected = make_user_config(app_data_root, "Acme", "App.exe_Url_old2", "1.0.0.0")
        found = SettingsResolver().resolve(V2, CURRENT, app_data_root)
        assert found is not None and found.path == expected

    def test_previous_identity_rename(self, app_data_root: Path) -> None:
        expected = make_user_config(app_data_root, "OldCo", "OldApp.exe_Url_q", "1.2.0.0")
        options = MigrationOptions(previous_identities=(Identity("OldCo", "OldApp"),))
        found = SettingsResolver().resolve(V2, CURRENT, app_data_root, options)
        assert found is not None and found.path == expected

    def test_previous_identity_hint_targets_that_directory(self, app_data_root: Path) -> None:
        expected = make_user_config(app_data_root, "OldCo", "OldApp.exe_Url_keep", "1.0.0.0")
        make_user_config(app_data_root, "OldCo", "OldApp.exe_Url_other", "1.5.0.0")
        previous = Identity.from_assembly_dir("OldCo", "OldApp.exe_Url_keep")
        options = MigrationOptions(previous_identities=(previous,))
        found = SettingsResolver().resolve(V2, CURRENT, app_data_root, options)
        assert found is not None and found.path == expected

    def test_previous_identity_ignored_without_option(self, app_data_root: Path) -> None:
        make_user_config(app_data_root, "OldCo", "OldApp.exe_Url_q", "1.2.0.0")
        assert SettingsResolver().resolve(V2, CURRENT, app_data_root) is None

    def test_accept_higher(self, app_data_root: Path) -> None:
        make_user_config(app_data_root, "Acme", "App.exe_Url_abc123", "3.0.0.0")
        assert SettingsResolver().resolve(V2, CURRENT, app_data_root) is None
        found = SettingsResolver().resolve(
            V2, CURRENT, app_data_root, MigrationOptions(accept_higher=True)
        )
        assert found is not None and str(found.version) == "3.0.0.0"

    def test_debug_tier_only_when_debugging(
        self, app_data_root: Path, recorder: RecordingScanner
    ) -> None:
        identity = Identity("Acme", "App")
        SettingsResolver(recorder).resolve(V2, identity, app_data_root)
        prefixes = {t.dir_prefix for call in recorder.calls for t in call["targets"]}
        assert prefixes == {"App"}

        recorder.calls.clear()
        SettingsResolver(recorder).resolve(
            V2, identity, app_data_root, MigrationOptions(debugging=True)
        )
        prefixes = [call["targets"][0].dir_prefix for call in recorder.calls]
        assert prefixes == ["App.vshost.exe", "App", "App.vshost.exe", "App"]
        assert [call["accept_same"] for call in recorder.calls] == [False, False, True, True]

    def test_debug_tier_wins_before_extensionless(self, app_data_root: Path) -> None:
        make_user_config(app_data_root, "Acme", "App.exe_Url_rel", "1.9.0.0")
        expected = make_user_config(app_data_root, "Acme", "App.vshost.exe_Url_dbg", "1.1.0.0")
        found = SettingsResolver().resolve(
            V2, Identity("Acme", "App"), app_data_root, MigrationOptions(debugging=True)
        )
        assert found is not None and found.path == expected

    def test_nothing_found(self, app_data_root: Path) -> None:
        assert SettingsResolver().resolve(V2, CURRENT, app_data_root) is None


class TestValidation:
    def test_missing_version(self, app_data_root: Path) -> None:
        with pytest.raises(InvalidArgumentError):
            SettingsResolver().resolve(None, CURRENT, app_data_root)  # type: ignore[arg-type]

    def test_missing_identity(self, app_data_root: Path) -> None:
        with pytest.raises(InvalidArgumentError):
            SettingsResolver().resolve(V2, None, app_data_root)  # type: ignore[arg-type]

    def test_missing_root(self) -> None:
        with pytest.raises(InvalidArgumentError):
            SettingsResolver().resolve(V2, CURRENT, None)  # type: ignore[arg-type]


class TestVariantTargets:
    def test_deduplicates_case_insensitively(self) -> None:
        targets = variant_targets(
            [Identity("Acme", "App"), Identity("acme", "APP.exe")],
            ExtensionVariant.NONE,
        )
        assert targets == [ScanTarget("Acme", "App")]

    def test_hinted_identity_keeps_its_directory(self) -> None:
        hinted = Identity("OldCo", "OldApp", "OldApp.exe_Url_keep")
        for variant in ExtensionVariant:
            assert variant_targets([hinted], variant) == [
                ScanTarget("OldCo", "OldApp.exe_Url_keep")
            ]

    def test_fallback_targets_drop_current_hint(self, app_data_root: Path) -> None:
        recorder = RecordingScanner()
        SettingsResolver(recorder).resolve(V2, CURRENT, app_data_root)
        assert recorder.calls[1]["targets"] == [ScanTarget("Acme", "App")]
