"""Runtime settings resolved from the environment and an optional .env file.

Priority: real environment variable > project .env entry > default.
Only TODOS_* keys are read from .env; malformed lines are skipped.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = PROJECT_ROOT / 'data'
DEFAULT_ENV_FILE = PROJECT_ROOT / '.env'

ENV_KEYS = {
    'TODOS_DATA_DIR',
    'TODOS_ALT_SCREEN',
    'TODOS_LOG_LEVEL',
    'TODOS_LOG_FILE',
    'TODOS_PRIMARY',
    'TODOS_ACTIVE',
    'TODOS_COMPLETED',
}


def truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def read_env_file(path: Path = DEFAULT_ENV_FILE) -> Dict[str, str]:
    """Parse KEY=VALUE lines from a .env file, keeping only known keys."""
    values: Dict[str, str] = {}
    if not path.exists():
        return values
    try:
        text = path.read_text()
    except OSError:
        return values
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if k in ENV_KEYS:
            values[k] = v
    return values


def resolve(key: str, environ: Optional[Mapping[str, str]] = None,
            env_file: Optional[Mapping[str, str]] = None) -> Optional[str]:
    environ = os.environ if environ is None else environ
    env_file = read_env_file() if env_file is None else env_file
    return environ.get(key) or env_file.get(key)


@dataclass
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    alt_screen: bool = True
    log_level: str = "WARNING"
    log_file: Optional[Path] = None


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  env_file: Optional[Mapping[str, str]] = None) -> Settings:
    environ = os.environ if environ is None else environ
    env_file = read_env_file() if env_file is None else env_file

    def get(key: str) -> Optional[str]:
        return resolve(key, environ, env_file)

    data_dir = get('TODOS_DATA_DIR')
    log_file = get('TODOS_LOG_FILE')
    return Settings(
        data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
        alt_screen=truthy_env(get('TODOS_ALT_SCREEN'), True),
        log_level=(get('TODOS_LOG_LEVEL') or 'WARNING').upper(),
        log_file=Path(log_file).expanduser() if log_file else None,
    )
