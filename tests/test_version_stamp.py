from datetime import date
from pathlib import Path

from cpansa_db.models import VersionStamp
from cpansa_db.version_stamp import PreviousOutputReader, allocate_stamp, next_stamp


def _previous(tmp_path: Path, text: str) -> PreviousOutputReader:
    path = tmp_path / "DB.pm"
    path.write_text(text, encoding="utf-8")
    return PreviousOutputReader(path)


def test_same_day_increments_serial(tmp_path: Path):
    reader = _previous(tmp_path, "package CPANSA::DB;\nour $VERSION = '20240101.002';\n")

    stamp = allocate_stamp(reader, today=date(2024, 1, 1))

    assert str(stamp) == "20240101.003"


def test_new_day_resets_serial(tmp_path: Path):
    reader = _previous(tmp_path, "our $VERSION = '20231231.007';\n")

    stamp = allocate_stamp(reader, today=date(2024, 1, 1))

    assert str(stamp) == "20240101.001"


def test_first_match_wins(tmp_path: Path):
    reader = _previous(tmp_path, '{"version": "20240101.004", "other": "20240101.009"}')

    assert reader.read_previous_stamp() == (20240101, 4)


def test_missing_artifact_starts_at_one(tmp_path: Path):
    reader = PreviousOutputReader(tmp_path / "missing.pm")

    assert reader.read_previous_stamp() == (-1, 0)
    assert str(allocate_stamp(reader, today=date(2024, 1, 1))) == "20240101.001"


def test_artifact_without_stamp(tmp_path: Path):
    reader = _previous(tmp_path, "no version here\n")

    assert reader.read_previous_stamp() == (-1, 0)


def test_no_previous_path():
    assert PreviousOutputReader(None).read_previous_stamp() == (-1, 0)


def test_serial_is_zero_padded():
    assert str(next_stamp((20240101, 41), "20240101")) == "20240101.042"
    assert next_stamp((20240101, 41), "20240102") == VersionStamp(date="20240102", serial=1)


def test_four_digit_serial_keeps_increasing(tmp_path: Path):
    reader = _previous(tmp_path, "our $VERSION = '20240101.1000';\n")

    assert reader.read_previous_stamp() == (20240101, 1000)
    assert str(allocate_stamp(reader, today=date(2024, 1, 1))) == "20240101.1001"


def test_stamp_embedded_in_longer_number_is_ignored(tmp_path: Path):
    reader = _previous(tmp_path, "id 120240101.005 then 20240101.002\n")

    assert reader.read_previous_stamp() == (20240101, 2)
