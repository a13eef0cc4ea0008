from __future__ import annotations
import csv
import re
from pathlib import Path
from typing import List, Tuple

from .errors import InvalidInput
from .rules import LotoRules

BONUS_LABEL_RE = re.compile(r"^\s*(bonus|chance)\b", re.IGNORECASE)


def _ints_in(s: str) -> List[int]:
    return [int(x) for x in re.findall(r"\d+", s)]


def load_pool_file(path: str | Path, rules: LotoRules = LotoRules()) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
    """
    Reads a pool from CSV/TXT.

    Rows whose first cell starts with "bonus" or "chance" feed the bonus pool;
    every other row with numbers feeds the main pool, in file order. Rows
    without numbers (headers, blank lines) are skipped.
    """
    main: List[int] = []
    bonus: List[int] = []
    p = Path(path)

    with p.open("r", encoding="utf-8", newline="") as f:
        for row in csv.reader(f):
            if not row:
                continue
            ints: List[int] = []
            for cell in row:
                ints.extend(_ints_in(cell))
            if not ints:
                continue
            if BONUS_LABEL_RE.match(row[0]):
                bonus.extend(ints)
            else:
                main.extend(ints)

    if not main:
        raise InvalidInput(f"No pool numbers found in {p}")
    return rules.validate_pool(main), rules.validate_bonus_pool(bonus)
