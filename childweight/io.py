from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

import numpy as np

from childweight.parameters import FEMALE, MALE
from childweight.population import Population


AGE_COLUMNS = ('age', 'age_years', 'age_y')
SEX_COLUMNS = ('sex', 'gender')
FFM_COLUMNS = ('ffm', 'ffm_kg', 'fat_free_mass', 'fat_free_mass_kg')
FM_COLUMNS = ('fm', 'fm_kg', 'fat_mass', 'fat_mass_kg')

_SEX_CODES = {
    'm': MALE,
    'male': MALE,
    'f': FEMALE,
    'female': FEMALE,
}


def _read_lines(path: Path) -> list[str]:
    text = path.read_text(encoding='utf-8', errors='ignore')
    return [l.strip() for l in text.splitlines() if l.strip() and not l.strip().startswith('#')]


def _detect_delimiter(header_line: str) -> str:
    semicolons = header_line.count(';')
    commas = header_line.count(',')
    return ';' if semicolons >= commas and semicolons > 0 else ','


def _parse_number(s: str) -> float:
    return float(s.strip().replace(',', '.'))


def _normalize_header(h: str) -> str:
    # "FFM (kg)" -> "ffm", "Fat-free mass" -> "fat_free_mass"
    h = re.sub(r'[\(\[].*?[\)\]]', '', h).strip().lower()
    return re.sub(r'[\s\-]+', '_', h)


def _find_col(headers: list[str], candidates: Iterable[str]) -> int:
    candidates = [c.lower() for c in candidates]
    for i, h in enumerate(headers):
        if h in candidates:
            return i
    return -1


def _parse_sex(s: str) -> float:
    code = _SEX_CODES.get(s.strip().lower())
    if code is not None:
        return float(code)
    return _parse_number(s)


def read_population_csv(path: Path) -> Population:
    """
    Read a population table with a header row naming age, sex, ffm and fm columns.

    Sex may be 0/1 or male/female (m/f). Values are not range-checked here; that is
    the runner's validation.
    """
    lines = _read_lines(path)
    if not lines:
        raise ValueError(f'Empty population file: {path.name}')

    delimiter = _detect_delimiter(lines[0])
    headers = [_normalize_header(h) for h in lines[0].split(delimiter)]

    cols = {
        'age': _find_col(headers, AGE_COLUMNS),
        'sex': _find_col(headers, SEX_COLUMNS),
        'ffm': _find_col(headers, FFM_COLUMNS),
        'fm': _find_col(headers, FM_COLUMNS),
    }
    missing = [name for name, idx in cols.items() if idx == -1]
    if missing:
        raise ValueError(f'Missing columns in {path.name}: {", ".join(missing)}')

    rows: dict[str, list[float]] = {name: [] for name in cols}
    for line_no, line in enumerate(lines[1:], start=2):
        parts = line.split(delimiter)
        if len(parts) <= max(cols.values()):
            raise ValueError(f'{path.name}:{line_no}: expected {len(headers)} columns, got {len(parts)}')
        try:
            rows['age'].append(_parse_number(parts[cols['age']]))
            rows['sex'].append(_parse_sex(parts[cols['sex']]))
            rows['ffm'].append(_parse_number(parts[cols['ffm']]))
            rows['fm'].append(_parse_number(parts[cols['fm']]))
        except ValueError as e:
            raise ValueError(f'{path.name}:{line_no}: {e}') from e

    if not rows['age']:
        raise ValueError(f'No individuals found in {path.name}')

    return Population.from_arrays(rows['age'], rows['sex'], rows['ffm'], rows['fm'])


def read_intake_csv(path: Path) -> np.ndarray:
    """
    Read an intake matrix (kcal/day): one row per individual, one column per day.

    A first line that does not parse as numbers is taken as a header and skipped.
    """
    lines = _read_lines(path)
    if not lines:
        raise ValueError(f'Empty intake file: {path.name}')

    delimiter = _detect_delimiter(lines[0])

    def parse_row(line: str) -> list[float]:
        return [_parse_number(p) for p in line.split(delimiter) if p.strip()]

    start = 0
    try:
        parse_row(lines[0])
    except ValueError:
        start = 1

    rows: list[list[float]] = []
    for line_no, line in enumerate(lines[start:], start=start + 1):
        try:
            rows.append(parse_row(line))
        except ValueError as e:
            raise ValueError(f'{path.name}:{line_no}: {e}') from e

    if not rows:
        raise ValueError(f'No intake rows found in {path.name}')

    widths = {len(r) for r in rows}
    if len(widths) != 1:
        raise ValueError(f'Intake rows in {path.name} have different lengths: {sorted(widths)}')

    return np.asarray(rows, dtype=float)
