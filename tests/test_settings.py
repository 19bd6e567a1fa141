"""Tests for kombucha_calc.settings: the settings value and its JSON store."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path

import pytest

from kombucha_calc.settings import (
    FermentationSettings,
    SettingsStore,
    combine_start,
    format_start_instant,
    parse_start_instant,
    resolve_start,
)


@pytest.fixture
def store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(str(tmp_path / "nested" / "settings.json"))


def write_record(store: SettingsStore, record: object) -> None:
    Path(store.path).parent.mkdir(parents=True, exist_ok=True)
    Path(store.path).write_text(json.dumps(record))


class TestDefaults:
    def test_first_load_uses_defaults(self, store: SettingsStore) -> None:
        settings = store.load()
        assert settings == FermentationSettings(22.0, 10.0, 70.0, None)

    def test_missing_keys_fall_back(self, store: SettingsStore) -> None:
        write_record(store, {"kombuchaTemp": "26"})
        settings = store.load()
        assert settings.temperature_c == 26.0
        assert settings.starter_percent == 10.0
        assert settings.sugar_g_per_l == 70.0
        assert settings.start_instant is None


class TestRoundTrip:
    @pytest.mark.parametrize(
        "settings",
        [
            FermentationSettings(),
            FermentationSettings(24.5, 15.0, 95.0, datetime(2024, 6, 1, 9, 0)),
            FermentationSettings(15.0, 5.0, 40.0, datetime(2024, 6, 1, 9, 17, 42)),
            FermentationSettings(35.0, 30.0, 120.0, None),
        ],
    )
    def test_save_then_load(self, store: SettingsStore, settings: FermentationSettings) -> None:
        store.save(settings)
        assert store.load() == settings

    def test_values_are_string_encoded(self, store: SettingsStore) -> None:
        store.save(FermentationSettings(22.0, 10.0, 70.5, datetime(2024, 6, 1, 9, 0)))
        record = json.loads(Path(store.path).read_text())
        assert record == {
            "kombuchaTemp": "22",
            "kombuchaStarter": "10",
            "kombuchaSugar": "70.5",
            "kombuchaStartDate": "2024-06-01T09:00",
        }

    def test_unset_start_is_empty_string(self, store: SettingsStore) -> None:
        store.save(FermentationSettings())
        record = json.loads(Path(store.path).read_text())
        assert record["kombuchaStartDate"] == ""

    def test_save_leaves_no_temp_file(self, store: SettingsStore) -> None:
        store.save(FermentationSettings())
        assert not Path(store.path + ".tmp").exists()


class TestFallbacks:
    def test_unreadable_number_uses_default(self, store: SettingsStore, caplog: pytest.LogCaptureFixture) -> None:
        write_record(store, {"kombuchaStarter": "lots"})
        with caplog.at_level(logging.WARNING, logger="kombucha_calc.settings"):
            settings = store.load()
        assert settings.starter_percent == 10.0
        assert "starter_percent" in caplog.text

    def test_out_of_range_is_clipped(self, store: SettingsStore) -> None:
        write_record(store, {"kombuchaTemp": "50", "kombuchaSugar": "10"})
        settings = store.load()
        assert settings.temperature_c == 35.0
        assert settings.sugar_g_per_l == 40.0

    def test_unreadable_start_means_no_batch(self, store: SettingsStore) -> None:
        write_record(store, {"kombuchaStartDate": "last tuesday"})
        assert store.load().start_instant is None

    @pytest.mark.parametrize("raw", [1717232400, ["2024-06-01T09:00"], {"date": "2024-06-01"}, True])
    def test_non_text_start_means_no_batch(
        self, store: SettingsStore, raw: object, caplog: pytest.LogCaptureFixture
    ) -> None:
        write_record(store, {"kombuchaTemp": "26", "kombuchaStartDate": raw})
        with caplog.at_level(logging.WARNING, logger="kombucha_calc.settings"):
            settings = store.load()
        assert settings.start_instant is None
        assert settings.temperature_c == 26.0
        assert "start date" in caplog.text

    def test_corrupt_file_uses_defaults(self, store: SettingsStore) -> None:
        Path(store.path).parent.mkdir(parents=True)
        Path(store.path).write_text("{not json")
        assert store.load() == FermentationSettings()

    def test_non_object_file_uses_defaults(self, store: SettingsStore) -> None:
        write_record(store, ["kombuchaTemp", "22"])
        assert store.load() == FermentationSettings()


class TestStartInstant:
    def test_parse_minutes(self) -> None:
        assert parse_start_instant("2024-06-01T09:30") == datetime(2024, 6, 1, 9, 30)

    def test_parse_empty(self) -> None:
        assert parse_start_instant("") is None

    def test_parse_aware_becomes_local_naive(self) -> None:
        parsed = parse_start_instant("2024-06-01T09:30+00:00")
        assert parsed is not None
        assert parsed.tzinfo is None

    def test_format_unset(self) -> None:
        assert format_start_instant(None) == ""

    def test_combine_date_and_hour(self) -> None:
        assert combine_start(date(2024, 6, 1), 21) == datetime(2024, 6, 1, 21, 0)

    def test_combine_without_date(self) -> None:
        assert combine_start(None, 9) is None


class TestWithChanges:
    def test_returns_new_value(self) -> None:
        original = FermentationSettings()
        changed = original.with_changes(temperature_c=26.0)
        assert changed.temperature_c == 26.0
        assert original.temperature_c == 22.0



# ── Widget merge and save-on-change ──────────────────────────────────


class TestResolveStart:
    SAVED = datetime(2024, 6, 1, 9, 17)

    def test_unchanged_date_and_hour_keep_minutes(self) -> None:
        assert resolve_start(self.SAVED, date(2024, 6, 1), 9) == self.SAVED

    def test_new_hour_replaces_start(self) -> None:
        assert resolve_start(self.SAVED, date(2024, 6, 1), 10) == datetime(2024, 6, 1, 10, 0)

    def test_new_date_replaces_start(self) -> None:
        assert resolve_start(self.SAVED, date(2024, 6, 2), 9) == datetime(2024, 6, 2, 9, 0)

    def test_cleared_date_unsets_start(self) -> None:
        assert resolve_start(self.SAVED, None, 9) is None

    def test_no_saved_start(self) -> None:
        assert resolve_start(None, date(2024, 6, 1), 9) == datetime(2024, 6, 1, 9, 0)

    def test_saved_minutes_survive_save_and_reload(self, store: SettingsStore) -> None:
        store.save(FermentationSettings(start_instant=self.SAVED))
        loaded = store.load()
        start = resolve_start(loaded.start_instant, loaded.start_instant.date(), loaded.start_instant.hour)
        assert start == self.SAVED


class TestCommit:
    def test_change_is_written(self, store: SettingsStore) -> None:
        current = FermentationSettings()
        changed = current.with_changes(temperature_c=26.5)
        assert store.commit(current, changed) == changed
        record = json.loads(Path(store.path).read_text())
        assert record["kombuchaTemp"] == "26.5"

    def test_cleared_start_is_written_as_empty(self, store: SettingsStore) -> None:
        current = FermentationSettings(start_instant=datetime(2024, 6, 1, 9, 0))
        store.save(current)
        store.commit(current, current.with_changes(start_instant=None))
        record = json.loads(Path(store.path).read_text())
        assert record["kombuchaStartDate"] == ""
        assert store.load().start_instant is None

    def test_unchanged_settings_are_not_rewritten(self, store: SettingsStore) -> None:
        current = FermentationSettings()
        assert store.commit(current, FermentationSettings()) == current
        assert not Path(store.path).exists()
