from __future__ import annotations

import logging

from docbind.blocks import CodeBlock
from docbind.fields import assign_value
from docbind.layout import LayoutNode

logger = logging.getLogger(__name__)


def parse_info(info: str) -> tuple[str, str]:
    """Split a fence info string into language tag and info text.

    ```` ```csv :users ```` gives ``("csv", "users")``; ```` ```sql ```` gives
    ``("sql", "")``.
    """
    language, _, rest = info.partition(":")
    return language.strip(), rest.strip()


def bind_fence(node: LayoutNode, target: object, block: CodeBlock, *, section: str) -> bool:
    language, info = parse_info(block.info)
    slot = node.find_fence(language)
    if slot is None:
        logger.debug("ignoring %r fence in section %r", language, section)
        return False
    assign_value(target, slot.body_field, block.literal.strip("\n"), kind="code fence", section=section)
    assign_value(target, slot.language_field, language, kind="code fence's lang", section=section)
    assign_value(target, slot.info_field, info, kind="code fence's info", section=section)
    return True
