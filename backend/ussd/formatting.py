"""Screen-budget helpers for USSD result screens."""

from __future__ import annotations

from typing import Sequence

ELLIPSIS = "..."


def summarize_charges(charges: Sequence[str], shown: int = 2) -> str:
    """
    ``["Robbery", "Assault", "Fraud"]`` → ``"Robbery, Assault +1 more"``.

    At most ``shown`` charges are listed; the rest are counted.
    """
    items = [c for c in (str(c).strip() for c in charges) if c]
    if not items:
        return "N/A"
    text = ", ".join(items[:shown])
    extra = len(items) - shown
    if extra > 0:
        text = f"{text} +{extra} more"
    return text


def fit_screen(response: str, limit: int = 182) -> str:
    """
    Clip a full response (prefix included) to ``limit`` characters.

    The ``CON ``/``END `` prefix is never cut; an ellipsis marks the clip.
    """
    if len(response) <= limit:
        return response
    return response[: max(limit - len(ELLIPSIS), 4)].rstrip() + ELLIPSIS


def clip(text: str, width: int) -> str:
    """Shorten ``text`` to ``width`` characters, marking the cut."""
    if len(text) <= width:
        return text
    if width <= len(ELLIPSIS):
        return text[: max(width, 0)]
    return text[: width - len(ELLIPSIS)].rstrip() + ELLIPSIS


def fit_lines(
    lines: Sequence[str],
    limit: int = 182,
    shrinkable: Sequence[int] = (),
    floor: int = 12,
) -> str:
    """
    Join ``lines`` into one screen of at most ``limit`` characters.

    Only the lines at the ``shrinkable`` indexes are shortened, in the
    order given and never below ``floor`` characters, so the fixed lines
    (headers, warrant numbers, instructions) survive intact.  Whatever
    still overflows is left to ``fit_screen``.
    """
    lines = list(lines)
    overflow = len("\n".join(lines)) - limit
    for index in shrinkable:
        if overflow <= 0:
            break
        line = lines[index]
        shortened = clip(line, max(len(line) - overflow, floor))
        overflow -= len(line) - len(shortened)
        lines[index] = shortened
    return "\n".join(lines)
