# app/utils/text_search.py
"""
Substring search over user-typed text.

Search boxes feed straight into LIKE. `%` and `_` typed by the user are
matched literally, so `?q=%` finds names containing a percent sign rather
than every row.
"""

LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    escaped = (
        text.strip()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
