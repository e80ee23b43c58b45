"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Supports palette overrides via environment or project .env file.
"""
from __future__ import annotations
import os, sys
from typing import Mapping

from config import read_env_file

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _valid_hex(value: str | None) -> bool:
    if not value:
        return False
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    return f"\033[38;5;{16 + 36 * r6 + 6 * g6 + b6}m"

def _from_hex(hex_code: str) -> str:
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)

def _palette(key: str, default: str, environ: Mapping[str, str] | None = None,
             env_file: Mapping[str, str] | None = None) -> str:
    """First valid hex value from: real env var, .env entry, default."""
    environ = os.environ if environ is None else environ
    env_file = read_env_file() if env_file is None else env_file
    for value in (environ.get(key), env_file.get(key)):
        if _valid_hex(value):
            return '#' + value.lstrip('#')
    return default

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')
STRIKE = _code('9')

HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_ACTIVE_DEFAULT = '#48B3AF'
HEX_COMPLETED_DEFAULT = '#A7E399'

HEX_PRIMARY = _palette('TODOS_PRIMARY', HEX_PRIMARY_DEFAULT)
HEX_ACTIVE = _palette('TODOS_ACTIVE', HEX_ACTIVE_DEFAULT)
HEX_COMPLETED = _palette('TODOS_COMPLETED', HEX_COMPLETED_DEFAULT)

PRIMARY = _from_hex(HEX_PRIMARY)
C_ACTIVE = _from_hex(HEX_ACTIVE)
C_COMPLETED = _from_hex(HEX_COMPLETED)

HEADER_COLOR = PRIMARY
ROW_COLOR = PRIMARY + BOLD  # row numbers in bold primary
EMPTY_COLOR = DIM + PRIMARY
ACTIVE_COLOR = C_ACTIVE
COMPLETED_COLOR = DIM + STRIKE + C_COMPLETED  # struck through like a crossed-off item
EDIT_COLOR = BOLD + C_ACTIVE

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET

__all__ = [
    'color','RESET','BOLD','DIM','STRIKE','HEADER_COLOR','ROW_COLOR','EMPTY_COLOR',
    'ACTIVE_COLOR','COMPLETED_COLOR','EDIT_COLOR',
    'HEX_PRIMARY','HEX_ACTIVE','HEX_COMPLETED','_ENABLE','_USE_TRUECOLOR','_FORCE'
]
