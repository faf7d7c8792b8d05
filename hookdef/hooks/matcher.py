"""
Tool-name matching for PreToolUse/PostToolUse hooks.
"""

import re
from functools import lru_cache
from typing import Optional, Pattern

from ..logger import logger

# Matchers the host treats as "every tool"
MATCH_ALL = ("", "*")


@lru_cache(maxsize=128)
def _compile(pattern: str) -> Optional[Pattern]:
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.debug(f"[matcher] Pattern {pattern!r} is not a valid regex ({e}), using literal match")
        return None


def matches(pattern: str, tool_name: str) -> bool:
    """
    Check whether a tool name is selected by a hook matcher.

    The pattern is searched for as a case-sensitive regular expression; a
    literal equality test is applied as well, so matchers that are not valid
    regular expressions still select the tool they spell out.

    Args:
        pattern: Matcher string from the hook declaration
        tool_name: Name of the tool in the event payload

    Returns:
        True if the tool is selected
    """
    if pattern in MATCH_ALL:
        return True
    if tool_name == pattern:
        return True
    regex = _compile(pattern)
    return bool(regex is not None and regex.search(tool_name))
