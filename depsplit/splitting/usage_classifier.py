"""
Usage Classifier

Computes, for each function, the set of imported namespaces its body refers to.

Each function is re-parsed on its own with ``ast`` and walked completely
(decorators, defaults, annotations, nested defs, lambdas, comprehensions). Every
name read is looked up in the import table; dotted paths such as
``os.path.join`` are attributed through their leading ``Name`` only.
"""

from __future__ import annotations

import ast
import logging
from typing import FrozenSet, Iterable, List, Set, Union

from ..errors import ReparseError
from .models import FunctionUnit, ImportTable

logger = logging.getLogger(__name__)

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


class ImportUsageVisitor(ast.NodeVisitor):
    """Collects imported names read anywhere below the visited node."""

    def __init__(self, table: ImportTable):
        self.table = table
        self.used: Set[str] = set()

    def visit_Name(self, node: ast.Name) -> None:
        if isinstance(node.ctx, ast.Load) and node.id in self.table:
            self.used.add(node.id)


def reparse_function(function: FunctionUnit) -> FunctionNode:
    """
    Parse an isolated function's text on its own.

    Raises:
        ReparseError: If the text is not exactly one function definition.
    """
    try:
        tree = ast.parse(function.body)
    except SyntaxError as e:
        raise ReparseError(function.name, f"line {e.lineno}: {e.msg}") from e

    defs = [n for n in tree.body if isinstance(n, (ast.FunctionDef, ast.AsyncFunctionDef))]
    if len(tree.body) != 1 or len(defs) != 1:
        raise ReparseError(function.name, "expected exactly one function definition")
    return defs[0]


class UsageClassifier:
    """Fills in ``usage_set`` for functions against one ImportTable."""

    def __init__(self, table: ImportTable):
        self.table = table

    def usage_set(self, function: FunctionUnit) -> FrozenSet[str]:
        node = reparse_function(function)
        visitor = ImportUsageVisitor(self.table)
        visitor.visit(node)
        return frozenset(visitor.used)

    def classify(self, functions: Iterable[FunctionUnit]) -> List[FunctionUnit]:
        """
        Compute usage sets in iteration order, skipping the entry function.

        Returns:
            The classified (non-entry) functions, in the same order
        """
        classified: List[FunctionUnit] = []
        for function in functions:
            if function.is_entry:
                continue
            function.usage_set = self.usage_set(function)
            logger.debug(f"{function.name}: uses {sorted(function.usage_set) or 'no imports'}")
            classified.append(function)
        return classified
