# tests/test_io.py
"""Tests for CSV input parsing."""

from pathlib import Path

import numpy as np
import pytest

from childweight.io import read_intake_csv, read_population_csv


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestReadPopulation:
    """Tests for the population table reader."""

    def test_plain_comma_table(self, temp_dir):
        path = _write(temp_dir / "pop.csv", "age,sex,ffm,fm\n10,0,25,5\n8,1,20,6.5\n")
        p = read_population_csv(path)

        assert len(p) == 2
        np.testing.assert_array_equal(p.age, [10.0, 8.0])
        np.testing.assert_array_equal(p.sex, [0.0, 1.0])
        np.testing.assert_array_equal(p.fm, [5.0, 6.5])

    def test_semicolon_units_and_decimal_commas(self, temp_dir):
        """European export: ';' delimiter, unit suffixes in headers, ',' decimals."""
        text = "Age (years);Sex;FFM (kg);FM (kg)\n10,5;male;25,2;5,1\n7;F;18;4,25\n"
        p = read_population_csv(_write(temp_dir / "pop.csv", text))

        np.testing.assert_allclose(p.age, [10.5, 7.0])
        np.testing.assert_array_equal(p.sex, [0.0, 1.0])
        np.testing.assert_allclose(p.ffm, [25.2, 18.0])
        np.testing.assert_allclose(p.fm, [5.1, 4.25])

    def test_long_column_names_in_any_order(self, temp_dir):
        text = "fat_mass,Fat-free mass,gender,age_years\n5,25,female,9\n"
        p = read_population_csv(_write(temp_dir / "pop.csv", text))

        assert p.ffm[0] == 25.0
        assert p.fm[0] == 5.0
        assert p.sex[0] == 1.0
        assert p.age[0] == 9.0

    def test_comments_and_blank_lines_skipped(self, temp_dir):
        text = "# cohort A\nage,sex,ffm,fm\n\n10,0,25,5\n# dropped out\n6,1,16,4\n"
        p = read_population_csv(_write(temp_dir / "pop.csv", text))
        assert len(p) == 2

    def test_missing_column(self, temp_dir):
        path = _write(temp_dir / "pop.csv", "age,sex,ffm\n10,0,25\n")

        with pytest.raises(ValueError, match="Missing columns.*fm"):
            read_population_csv(path)

    def test_bad_value_reports_line(self, temp_dir):
        path = _write(temp_dir / "pop.csv", "age,sex,ffm,fm\n10,0,25,5\n9,0,abc,5\n")

        with pytest.raises(ValueError, match="pop.csv:3"):
            read_population_csv(path)

    def test_short_row(self, temp_dir):
        path = _write(temp_dir / "pop.csv", "age,sex,ffm,fm\n10,0,25\n")

        with pytest.raises(ValueError, match="expected 4 columns"):
            read_population_csv(path)

    def test_empty_file(self, temp_dir):
        with pytest.raises(ValueError, match="Empty"):
            read_population_csv(_write(temp_dir / "pop.csv", "\n# nothing\n"))


class TestReadIntake:
    """Tests for the intake matrix reader."""

    def test_matrix(self, temp_dir):
        m = read_intake_csv(_write(temp_dir / "ei.csv", "1800,1850\n1500,1400\n"))
        np.testing.assert_array_equal(m, [[1800.0, 1850.0], [1500.0, 1400.0]])

    def test_header_skipped(self, temp_dir):
        m = read_intake_csv(_write(temp_dir / "ei.csv", "day0,day1,day2\n1800,1850,1900\n"))
        assert m.shape == (1, 3)

    def test_comment_line_skipped(self, temp_dir):
        m = read_intake_csv(_write(temp_dir / "ei.csv", "# kcal/day\n2000\n2100\n"))
        np.testing.assert_array_equal(m, [[2000.0], [2100.0]])

    def test_semicolon_decimal_commas(self, temp_dir):
        m = read_intake_csv(_write(temp_dir / "ei.csv", "1800,5;1900\n1500;1600,25\n"))
        np.testing.assert_allclose(m, [[1800.5, 1900.0], [1500.0, 1600.25]])

    def test_unequal_rows(self, temp_dir):
        path = _write(temp_dir / "ei.csv", "1800,1850\n1500\n")

        with pytest.raises(ValueError, match="different lengths"):
            read_intake_csv(path)

    def test_bad_value_reports_line(self, temp_dir):
        path = _write(temp_dir / "ei.csv", "1800,1850\n1500,oops\n")

        with pytest.raises(ValueError, match="ei.csv:2"):
            read_intake_csv(path)
