"""
Selector predicate used by node controllers.

Supports comma separated compound selectors built from:
    tag or *        element tag
    #id             ``id`` attribute
    .class          one of the whitespace separated ``class`` values
    [attr]          attribute present
    [attr=value]    attribute equal to value (value may be quoted)

Combinators (descendant, child, sibling) are not supported.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

from controllers.interfaces import TargetNode


_TOKEN = re.compile(
    r"""
    (?P<tag>^(?:\*|[A-Za-z_][\w-]*))
    |\#(?P<id>[\w-]+)
    |\.(?P<cls>[\w-]+)
    |\[\s*(?P<attr>[\w:-]+)\s*(?:=\s*(?P<value>"[^"]*"|'[^']*'|[^\]\s]+)\s*)?\]
    """,
    re.VERBOSE,
)


@lru_cache(maxsize=256)
def _compile(selector: str) -> tuple[tuple[tuple[str, str, Optional[str]], ...], ...]:
    """Turn a selector string into a tuple of compound selectors."""
    compounds = []
    for part in selector.split(","):
        part = part.strip()
        if not part:
            raise ValueError(f"Empty compound in selector {selector!r}")
        tests: list[tuple[str, str, Optional[str]]] = []
        pos = 0
        while pos < len(part):
            match = _TOKEN.match(part, pos)
            if match is None or match.end() == pos:
                raise ValueError(f"Unsupported selector syntax at {part[pos:]!r} in {selector!r}")
            if match.group("tag"):
                if match.group("tag") != "*":
                    tests.append(("tag", match.group("tag"), None))
            elif match.group("id"):
                tests.append(("attr", "id", match.group("id")))
            elif match.group("cls"):
                tests.append(("class", match.group("cls"), None))
            else:
                value = match.group("value")
                if value is not None and value[:1] in "\"'":
                    value = value[1:-1]
                tests.append(("attr", match.group("attr"), value))
            pos = match.end()
        compounds.append(tuple(tests))
    return tuple(compounds)


def matches(element: TargetNode, selector: str) -> bool:
    """Return True if ``element`` matches any compound of ``selector``."""
    for compound in _compile(selector):
        if all(_test(element, kind, name, value) for kind, name, value in compound):
            return True
    return False


def _test(element: TargetNode, kind: str, name: str, value: Optional[str]) -> bool:
    if kind == "tag":
        return element.tag == name
    if kind == "class":
        return name in (element.get_attribute("class") or "").split()
    actual = element.get_attribute(name)
    if value is None:
        return actual is not None
    return actual == value


def contains(context: TargetNode, element: TargetNode) -> bool:
    """True when ``context`` is ``element`` or one of its ancestors."""
    node: Optional[TargetNode] = element
    while node is not None:
        if node is context:
            return True
        node = node.parent
    return False
