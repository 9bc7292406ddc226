"""
Plain-text building blocks for assessment summaries.

Every function here returns uncolored text drawn with box characters.
colorize() adds ANSI codes afterwards, only when writing to a terminal.
"""

import os
import re
import sys
from typing import Any, List, Optional, Sequence, Tuple


def supports_color() -> bool:
    """Whether stdout should receive ANSI colors.

    NO_COLOR (https://no-color.org/) wins over FORCE_COLOR; otherwise color
    is used only for a TTY.
    """
    if 'NO_COLOR' in os.environ:
        return False
    if 'FORCE_COLOR' in os.environ:
        return True
    isatty = getattr(sys.stdout, 'isatty', None)
    return bool(isatty and isatty())


# ── Box characters ─────────────────────────────────────────────────

_HEAVY = '═'
_LIGHT = '─'
_BAR = '│'

# (left, junction, right) for the top, middle and bottom table rules
_TOP = ('┌', '┬', '┐')
_MID = ('├', '┼', '┤')
_BOTTOM = ('└', '┴', '┘')

_BADGE = '▸'
_BULLET = '·'


# ── Primitives ─────────────────────────────────────────────────────

def title(text: str, width: int = 60) -> str:
    """Centered title between heavy rules.

    Example::

        ═══════════ Lifecycle Assessment ═══════════
    """
    fill = max(width - len(text) - 2, 4)
    return f"{_HEAVY * (fill // 2)} {text} {_HEAVY * (fill - fill // 2)}"


def heading(text: str) -> str:
    return f"  {text}\n  {_LIGHT * len(text)}"


def kv_block(items: Sequence[Tuple[str, str]], indent: int = 2) -> str:
    """Key/value lines with dot leaders, values aligned in one column.

    Example::

        Hardware ···· 4 x NVIDIA A100
        Lifetime ···· 2 years
    """
    if not items:
        return ""
    key_width = max(len(key) for key, _ in items)
    lines = []
    for key, value in items:
        leader = _BULLET * (key_width - len(key) + 2)
        lines.append(f"{' ' * indent}{key} {leader} {value}")
    return "\n".join(lines)


def table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    aligns: Optional[Sequence[str]] = None,
) -> str:
    """Bordered table.

    Args:
        headers: Column titles; also fixes the column count.
        rows: Row values, converted with str(). Short rows are padded, extra
              cells are dropped.
        aligns: 'l' or 'r' per column (default: all left).
    """
    if not headers:
        return ""
    ncols = len(headers)
    aligns = list(aligns or ['l'] * ncols)
    body: List[List[str]] = [
        [str(v) for v in row[:ncols]] + [''] * (ncols - len(row)) for row in rows
    ]
    head = [str(h) for h in headers]
    widths = [max(len(r[i]) for r in [head] + body) for i in range(ncols)]

    def rule(chars: Tuple[str, str, str]) -> str:
        left, junction, right = chars
        return left + junction.join(_LIGHT * (w + 2) for w in widths) + right

    def line(cells: Sequence[str]) -> str:
        padded = [
            c.rjust(w) if align == 'r' else c.ljust(w)
            for c, w, align in zip(cells, widths, aligns)
        ]
        return _BAR + _BAR.join(f" {c} " for c in padded) + _BAR

    out = [rule(_TOP), line(head), rule(_MID)]
    out.extend(line(r) for r in body)
    out.append(rule(_BOTTOM))
    return "\n".join(out)


def badge(label: str, value: str, indent: int = 2) -> str:
    """One highlighted result, e.g. ``▸ Carbon offset: +12.40%``."""
    return f"{' ' * indent}{_BADGE} {label}: {value}"


def note_block(notes: Sequence[str], indent: int = 2) -> str:
    return "\n".join(f"{' ' * indent}{_BULLET} {note}" for note in notes)


def signed_pct(value: float) -> str:
    return f"{value:+.2f}%"


# ── ANSI colors ────────────────────────────────────────────────────

_RESET = '\033[0m'
_BOLD = '\033[1m'
_DIM = '\033[2m'
_GREEN = '\033[32m'
_RED = '\033[31m'
_YELLOW = '\033[33m'
_CYAN = '\033[36m'

# Whole-cell matches: grades and strategy statuses
_CELL_COLORS = {
    'A': _GREEN,
    'B': _GREEN,
    'C': _YELLOW,
    'D': _RED,
    'E': _RED,
    'Applied': _GREEN,
    'Available': _YELLOW,
    'Baseline optimal': _DIM,
}

_PCT_RE = re.compile(r'[+-]\d+(?:\.\d+)?%')
_RULE_STARTS = {_TOP[0], _MID[0], _BOTTOM[0]}


def _paint(text: str, *codes: str) -> str:
    return ''.join(codes) + text + _RESET


def colorize(text: str) -> str:
    """Color a formatted summary line by line.

    Titles are bold cyan; rules, borders and notes are dim; grade and status
    cells get their own colors; signed percentages are green when positive
    (a reduction) and red when negative.
    """
    return '\n'.join(_colorize_line(line) for line in text.split('\n'))


def _colorize_line(line: str) -> str:
    stripped = line.strip()
    if not stripped:
        return line
    if _HEAVY in line and stripped[0] != _BAR:
        return _paint(line, _BOLD, _CYAN)
    if set(stripped) == {_LIGHT} or stripped[0] in _RULE_STARTS or stripped[0] == _BULLET:
        return _paint(line, _DIM)
    if stripped[0] == _BAR:
        return _paint(_BAR, _DIM).join(_colorize_cell(c) for c in line.split(_BAR))
    if _BADGE in line:
        line = line.replace(_BADGE, _paint(_BADGE, _YELLOW))
    return _colorize_percentages(line)


def _colorize_cell(cell: str) -> str:
    value = cell.strip()
    color = _CELL_COLORS.get(value)
    if color:
        return cell.replace(value, _paint(value, color))
    return _colorize_percentages(cell)


def _colorize_percentages(text: str) -> str:
    return _PCT_RE.sub(
        lambda m: _paint(m.group(0), _GREEN if m.group(0)[0] == '+' else _RED), text)
