from __future__ import annotations

from pathlib import Path

import pytest

from spec_lab.config import LabOverrides, load_effective_config


def _write(tmp_path: Path, text: str) -> None:
    (tmp_path / "spec_lab.toml").write_text(text, encoding="utf-8")


def test_section_must_be_a_table(tmp_path: Path) -> None:
    _write(tmp_path, 'search = "fast"\n')
    with pytest.raises(ValueError, match="Config section 'search' must be a table."):
        load_effective_config(tmp_path)


def test_max_hits_must_be_positive(tmp_path: Path) -> None:
    _write(tmp_path, "[search]\nmax_hits = 0\n")
    with pytest.raises(ValueError, match="search.max_hits' must be a positive integer"):
        load_effective_config(tmp_path)


def test_max_hits_respects_cap(tmp_path: Path) -> None:
    _write(tmp_path, "[search]\nmax_hits = 501\n")
    with pytest.raises(ValueError, match="must be <= 500"):
        load_effective_config(tmp_path)


def test_boolean_is_not_an_integer(tmp_path: Path) -> None:
    _write(tmp_path, "[search]\nbatch_size = true\n")
    with pytest.raises(ValueError, match="search.batch_size"):
        load_effective_config(tmp_path)


def test_ceiling_slack_must_be_non_negative(tmp_path: Path) -> None:
    _write(tmp_path, "[distance]\nceiling_slack = -1\n")
    with pytest.raises(ValueError, match="must be a non-negative integer"):
        load_effective_config(tmp_path)


def test_unknown_enum_value_lists_allowed_values(tmp_path: Path) -> None:
    _write(tmp_path, '[taxonomy]\nmetric = "bytes"\n')
    with pytest.raises(ValueError, match="must be one of: groups, lines, patchBytes"):
        load_effective_config(tmp_path)


def test_soft_assignment_must_be_boolean(tmp_path: Path) -> None:
    _write(tmp_path, '[taxonomy]\nsoft_assignment = "yes"\n')
    with pytest.raises(ValueError, match="taxonomy.soft_assignment' must be a boolean"):
        load_effective_config(tmp_path)


def test_data_dir_must_be_string(tmp_path: Path) -> None:
    _write(tmp_path, "data_dir = 3\n")
    with pytest.raises(ValueError, match="Config field 'data_dir' must be a string."):
        load_effective_config(tmp_path)


def test_invalid_override_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="overrides.granularity"):
        load_effective_config(tmp_path, overrides=LabOverrides(granularity="week"))
