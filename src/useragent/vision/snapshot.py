"""Interactive element extraction from Playwright ARIA snapshots."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

INTERACTIVE_ROLES: frozenset[str] = frozenset({
    "button",
    "link",
    "textbox",
    "checkbox",
    "radio",
    "combobox",
    "listbox",
    "menuitem",
    "menuitemcheckbox",
    "menuitemradio",
    "option",
    "searchbox",
    "slider",
    "spinbutton",
    "switch",
    "tab",
    "treeitem",
})

# - textbox "Email" [focused]: jane@example.com
_LINE_RE = re.compile(r'^\s*-\s+(?P<role>[a-zA-Z]+)(?:\s+"(?P<name>(?:[^"\\]|\\.)*)")?(?P<rest>.*)$')
_ATTR_RE = re.compile(r"\[([a-z]+)(?:=[^\]]*)?\]")


@dataclass(frozen=True)
class InteractiveElement:
    """One interactive element with an id that is stable for a single capture."""

    id: str
    role: str
    name: str
    description: str | None = None
    value: str | None = None
    disabled: bool = False
    focused: bool = False
    nth_index: int = 0


def is_interactive(role: str) -> bool:
    return role.lower() in INTERACTIVE_ROLES


def parse_aria_snapshot(snapshot: str) -> list[InteractiveElement]:
    """Flatten an ARIA snapshot into the ordered list of interactive elements.

    Ids are `<role prefix>-<n>` with `n` counted per capture, so the same page
    state always yields the same ids.
    """
    elements: list[InteractiveElement] = []
    seen: dict[tuple[str, str], int] = {}
    for line in snapshot.splitlines():
        match = _LINE_RE.match(line)
        if match is None:
            continue
        role = match.group("role").lower()
        if role not in INTERACTIVE_ROLES:
            continue
        name = (match.group("name") or "").replace('\\"', '"')
        rest = match.group("rest") or ""
        attributes = set(_ATTR_RE.findall(rest))
        value = _extract_value(rest)

        key = (role, name)
        nth_index = seen.get(key, 0)
        seen[key] = nth_index + 1

        elements.append(
            InteractiveElement(
                id=f"{role[:3]}-{len(elements) + 1}",
                role=role,
                name=name,
                value=value,
                disabled="disabled" in attributes,
                focused="focused" in attributes,
                nth_index=nth_index,
            )
        )
    return elements


def _extract_value(rest: str) -> str | None:
    _, separator, tail = rest.partition(":")
    if not separator:
        return None
    value = tail.strip().strip('"')
    return value or None


def find_element(elements: Sequence[InteractiveElement], element_id: str) -> InteractiveElement | None:
    for element in elements:
        if element.id == element_id:
            return element
    return None


def format_elements_for_llm(elements: Sequence[InteractiveElement]) -> str:
    if not elements:
        return "No interactive elements found on the page."

    lines: list[str] = []
    for element in elements:
        line = f'[{element.id}] {element.role}: "{element.name}"'
        if element.description:
            line += f" ({element.description})"
        if element.value:
            line += f' = "{element.value}"'
        if element.disabled:
            line += " [disabled]"
        if element.focused:
            line += " [focused]"
        lines.append(line)
    return "\n".join(lines)
