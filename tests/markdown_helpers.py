from __future__ import annotations

import textwrap


def doc(text: str) -> str:
    """Dedent an indented triple-quoted markdown fixture."""
    return textwrap.dedent(text).lstrip("\n")
