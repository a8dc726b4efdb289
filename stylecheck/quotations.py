from __future__ import annotations

import math
import re

from . import config
from .models import Quotation

# Straight or curly double quotes on both sides; no nesting awareness.
QUOTATION_PATTERN = re.compile(r"[\"“]([^\"“”]+)[\"”]")


def estimate_line_count(text: str, chars_per_line: int = config.CHARS_PER_LINE) -> int:
    literal_lines = text.count("\n") + 1
    estimated_lines = math.ceil(len(text) / chars_per_line)
    return max(literal_lines, estimated_lines)


def detect_quotations(
    text: str,
    chars_per_line: int = config.CHARS_PER_LINE,
    block_min_lines: int = config.BLOCK_QUOTE_MIN_LINES,
) -> tuple[Quotation, ...]:
    """Find double-quoted spans in flattened document text.

    A span whose closing mark is missing never matches and is skipped.
    """
    quotations: list[Quotation] = []
    for match in QUOTATION_PATTERN.finditer(text):
        quoted = match.group(1)
        line_count = estimate_line_count(quoted, chars_per_line)
        quotations.append(
            Quotation(
                text=quoted,
                start_offset=match.start(),
                line_count=line_count,
                needs_block_format=line_count > block_min_lines,
            )
        )
    return tuple(quotations)
