"""Config + repo paths for the simulation driver.

Policy:
- Required keys have no defaults in code.
- If a required key is missing or has the wrong type, fail with a clear error.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


REPO_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = REPO_ROOT / 'config.json'


def resolve_path(p: str, base: Path = REPO_ROOT) -> Path:
    path = Path(p)
    return path if path.is_absolute() else (base / path)


def load_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding='utf-8'))


def _require_path(cfg: dict, keys: list[str]) -> Any:
    cur: Any = cfg
    prefix: list[str] = []
    for k in keys:
        prefix.append(k)
        if not isinstance(cur, dict) or k not in cur:
            raise KeyError(f'Missing required config key: {".".join(prefix)}')
        cur = cur[k]
    return cur


def req_str(cfg: dict, keys: list[str]) -> str:
    v = _require_path(cfg, keys)
    if not isinstance(v, str) or not v.strip():
        raise ValueError(f'Config key {".".join(keys)} must be a non-empty string.')
    return v


def req_float(cfg: dict, keys: list[str]) -> float:
    v = _require_path(cfg, keys)
    if isinstance(v, bool):
        raise ValueError(f'Config key {".".join(keys)} must be a float-like value.')
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise ValueError(f'Config key {".".join(keys)} must be a float-like value.') from e


def req_int(cfg: dict, keys: list[str]) -> int:
    v = _require_path(cfg, keys)
    if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
        raise ValueError(f'Config key {".".join(keys)} must be an int-like value.')
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise ValueError(f'Config key {".".join(keys)} must be an int-like value.') from e


def req_bool(cfg: dict, keys: list[str]) -> bool:
    v = _require_path(cfg, keys)
    if not isinstance(v, bool):
        raise ValueError(f'Config key {".".join(keys)} must be true or false.')
    return v


def read_config(path: Path | None = None) -> dict:
    cfg = load_json(path or DEFAULT_CONFIG_PATH)
    validate_config(cfg)
    return cfg


def validate_config(cfg: dict) -> None:
    # Existence/type checks (no defaults).
    req_str(cfg, ['inputs', 'population_csv'])
    req_str(cfg, ['inputs', 'intake_csv'])

    days = req_float(cfg, ['simulation', 'days'])
    if days < 0.0:
        raise ValueError('Config key simulation.days must be >= 0.')
    req_bool(cfg, ['simulation', 'validate'])
    if req_int(cfg, ['simulation', 'workers']) < 1:
        raise ValueError('Config key simulation.workers must be >= 1.')
    if req_int(cfg, ['simulation', 'chunk_size']) < 1:
        raise ValueError('Config key simulation.chunk_size must be >= 1.')

    req_str(cfg, ['output', 'dir'])
    req_bool(cfg, ['plotting', 'enabled'])
    if req_int(cfg, ['plotting', 'max_individuals']) < 1:
        raise ValueError('Config key plotting.max_individuals must be >= 1.')
