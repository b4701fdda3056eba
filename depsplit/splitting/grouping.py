"""
Group assignment.

Turns usage sets into group keys, fills each group with its members and the
imports they need, and gives every group a module identifier that is safe to
use as a file name.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Dict, FrozenSet, List, Sequence

from ..config import CollisionPolicy, GroupNaming
from ..errors import NamingCollisionError
from .models import FunctionUnit, Group, ImportTable

logger = logging.getLogger(__name__)


def sanitize_identifier(key: str) -> str:
    """Reduce a group key to characters that are valid inside a Python identifier."""
    cleaned = "".join(c for c in key if f"_{c}".isidentifier())
    cleaned = unicodedata.normalize("NFKC", cleaned)
    if cleaned and not cleaned.isidentifier():
        cleaned = f"_{cleaned}"
    return cleaned


class GroupAssigner:
    """
    Clusters classified functions by usage set.

    Keys are stable within a run: with ``usage`` naming they are derived from
    the sorted set contents, with ``sequential`` naming ``group_N`` is handed
    out the first time a distinct set is seen. Groups are emitted in the order
    their first member was classified.
    """

    def __init__(
        self,
        table: ImportTable,
        naming: GroupNaming = GroupNaming.USAGE,
        general_key: str = "general",
        on_collision: CollisionPolicy = CollisionPolicy.SUFFIX,
    ):
        self.table = table
        self.naming = naming
        self.general_key = general_key
        self.on_collision = on_collision

    def key_for(self, usage_set: FrozenSet[str], seen: Dict[FrozenSet[str], Group]) -> str:
        if not usage_set:
            return self.general_key
        if self.naming is GroupNaming.SEQUENTIAL:
            ordinal = sum(1 for s in seen if s) + 1
            return f"group_{ordinal}"
        return "_".join(sorted(usage_set))

    def assign(self, functions: Sequence[FunctionUnit]) -> List[Group]:
        groups: Dict[FrozenSet[str], Group] = {}

        for function in functions:
            group = groups.get(function.usage_set)
            if group is None:
                group = Group(
                    key=self.key_for(function.usage_set, groups),
                    usage_set=function.usage_set,
                )
                groups[function.usage_set] = group
            group.members.append(function)

        ordered = list(groups.values())
        for group in ordered:
            group.relevant_imports = self.table.statements_for(group.usage_set)

        self._assign_identifiers(ordered)
        return ordered

    def _assign_identifiers(self, groups: Sequence[Group]) -> None:
        taken: Dict[str, Group] = {}

        for group in groups:
            base = sanitize_identifier(group.key) or self.general_key
            identifier = base

            if identifier in taken:
                if self.on_collision is CollisionPolicy.ERROR:
                    raise NamingCollisionError(identifier, [taken[identifier].key, group.key])
                n = 2
                while f"{base}_{n}" in taken:
                    n += 1
                identifier = f"{base}_{n}"
                logger.warning(
                    f"Group {group.key!r} collides with {taken[base].key!r} as {base!r}; "
                    f"using {identifier!r}"
                )

            group.identifier = identifier
            taken[identifier] = group


def is_degenerate(groups: Sequence[Group]) -> bool:
    """True when every function landed in the general group."""
    return len(groups) == 1 and groups[0].is_general
