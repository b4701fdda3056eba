"""
Import Table Builder

Works out which names each top-level import makes visible and records them in
an ImportTable.

Resolution policy:
- explicit bound names win (``import a.b as c`` -> ``c``, ``from x import y`` -> ``y``)
- otherwise the root namespace of the imported path (``import a.b`` -> ``a``,
  ``from a.b import *`` -> ``a``)
- ``from __future__`` imports introduce nothing
- a name introduced twice maps to the later statement
"""

from __future__ import annotations

import logging
import unicodedata
from typing import List, Optional, Tuple, Union

import libcst as cst
from libcst.helpers import get_full_name_for_node

from .models import ImportStatement, ImportTable

logger = logging.getLogger(__name__)

FUTURE_MODULE = "__future__"


def _root_namespace(dotted: Optional[str]) -> Optional[str]:
    if not dotted:
        return None
    return dotted.split(".")[0]


def _from_module_name(node: cst.ImportFrom) -> Optional[str]:
    if node.module is None:
        return None
    return get_full_name_for_node(node.module)


def introduced_names(node: Union[cst.Import, cst.ImportFrom]) -> Tuple[str, ...]:
    """
    Names a single import statement makes visible.

    Args:
        node: LibCST Import or ImportFrom node

    Returns:
        Introduced names in the order they appear
    """
    names: List[str] = []

    if isinstance(node, cst.Import):
        for alias in node.names:
            bound = alias.evaluated_alias
            names.append(bound if bound else _root_namespace(alias.evaluated_name))

    elif isinstance(node, cst.ImportFrom):
        module_name = _from_module_name(node)
        if module_name == FUTURE_MODULE and not node.relative:
            return ()

        if isinstance(node.names, cst.ImportStar):
            # nothing bound explicitly: fall back to the root namespace
            if not node.relative:
                root = _root_namespace(module_name)
                if root:
                    names.append(root)
        else:
            for alias in node.names:
                names.append(alias.evaluated_alias or alias.evaluated_name)

    # the interpreter compares identifiers in NFKC form
    return tuple(dict.fromkeys(unicodedata.normalize("NFKC", n) for n in names if n))


def is_future_import(node: cst.CSTNode) -> bool:
    return (
        isinstance(node, cst.ImportFrom)
        and not node.relative
        and _from_module_name(node) == FUTURE_MODULE
    )


class ImportTableBuilder:
    """
    Builds an ImportTable from top-level import lines.

    Statements are recorded in the order they are added; that order is also the
    position used to sort the imports a group needs.
    """

    def __init__(self, table: Optional[ImportTable] = None):
        self.table = table if table is not None else ImportTable()
        self._position = 0

    def add(self, line: cst.SimpleStatementLine, text: str) -> ImportStatement:
        """
        Record one import line (which may hold several ``;``-separated imports).

        Args:
            line: LibCST statement line whose small statements are all imports
            text: Verbatim source text of the line

        Returns:
            The recorded ImportStatement
        """
        names: List[str] = []
        future = False
        for small in line.body:
            if is_future_import(small):
                future = True
                continue
            names.extend(introduced_names(small))

        statement = ImportStatement(
            text=text,
            introduced_names=tuple(dict.fromkeys(names)),
            position=self._position,
            is_future=future and not names,
        )
        self._position += 1

        for name in statement.introduced_names:
            previous = self.table.lookup(name)
            if previous is not None:
                logger.debug(
                    f"Name {name!r} re-imported; table now resolves it to: {text.strip()}"
                )

        self.table.add(statement)
        return statement
