"""Deep merge of partial hardware definition answers.

No single GetHardwareDefinition query returns the whole system, so the
answers of several category queries are folded into one tree. Nodes are
matched by their ``objnam`` at every level; later answers add children and
parameters to nodes an earlier answer introduced.
"""

from __future__ import annotations

from typing import Any

from .attributes import OBJNAM_KEY


def is_container(value: Any) -> bool:
    """Return True for a dict or a list, even an empty one."""
    return isinstance(value, dict | list)


def merge_response_list(target: list[Any], addition: list[Any]) -> None:
    """Merge the nodes of addition into target, matching them by objnam."""
    for item in addition:
        if isinstance(item, dict) and OBJNAM_KEY in item:
            objnam = item[OBJNAM_KEY]
            match = next(
                (
                    existing
                    for existing in target
                    if isinstance(existing, dict) and existing.get(OBJNAM_KEY) == objnam
                ),
                None,
            )
            if match is not None:
                merge_response(match, item)
                continue
        if item not in target:
            target.append(item)


def merge_response(
    target: dict[str, Any] | list[Any], addition: dict[str, Any] | list[Any]
) -> None:
    """Recursively merge addition into target, in place.

    When both sides hold a container for the same key the merge recurses
    (lists are merged by objnam); otherwise the value from addition wins.
    """
    if isinstance(target, list) and isinstance(addition, list):
        merge_response_list(target, addition)
        return

    if not isinstance(target, dict) or not isinstance(addition, dict):
        raise TypeError(
            f"cannot merge {type(addition).__name__} into {type(target).__name__}"
        )

    for key, value in addition.items():
        current = target.get(key)
        if is_container(current) and is_container(value):
            if isinstance(current, list) and isinstance(value, list):
                merge_response_list(current, value)
            elif isinstance(current, dict) and isinstance(value, dict):
                merge_response(current, value)
            else:
                target[key] = value
        else:
            target[key] = value
