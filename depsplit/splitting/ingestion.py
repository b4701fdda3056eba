"""
Unit ingestion.

Parses one compilation unit with LibCST (which keeps comments and formatting
intact) and sorts its top-level statements into imports, functions, the entry
function and everything else.
"""

from __future__ import annotations

import logging
from typing import Optional

import libcst as cst

from ..errors import ParseError
from .import_table import ImportTableBuilder
from .models import FunctionUnit, IngestedUnit, OtherItem

logger = logging.getLogger(__name__)


def parse_compilation_unit(source: str, file_path: Optional[str] = None) -> cst.Module:
    """
    Parse raw source text into a LibCST module.

    Raises:
        ParseError: If the text is not valid Python.
    """
    try:
        return cst.parse_module(source)
    except cst.ParserSyntaxError as e:
        raise ParseError(
            f"Unable to parse {file_path or '<source>'}: {e.message}",
            file_path=file_path,
            line_number=e.editor_line,
        ) from e


def is_import_line(stmt: cst.CSTNode) -> bool:
    """True for a simple statement line made only of import statements."""
    return isinstance(stmt, cst.SimpleStatementLine) and all(
        isinstance(small, (cst.Import, cst.ImportFrom)) for small in stmt.body
    )


def is_docstring(stmt: cst.CSTNode) -> bool:
    if not isinstance(stmt, cst.SimpleStatementLine) or len(stmt.body) != 1:
        return False
    expr = stmt.body[0]
    return isinstance(expr, cst.Expr) and isinstance(
        expr.value, (cst.SimpleString, cst.ConcatenatedString)
    )


def is_main_guard(stmt: cst.CSTNode) -> bool:
    """True for ``if __name__ == "__main__":``."""
    if not isinstance(stmt, cst.If):
        return False
    test = stmt.test
    if not isinstance(test, cst.Comparison) or len(test.comparisons) != 1:
        return False
    target = test.comparisons[0]
    return (
        isinstance(test.left, cst.Name)
        and test.left.value == "__name__"
        and isinstance(target.operator, cst.Equal)
        and isinstance(target.comparator, cst.SimpleString)
        and target.comparator.evaluated_value == "__main__"
    )


class UnitIngestor:
    """
    Sorts the top-level statements of a module into an IngestedUnit.

    Imports are handed to the ImportTableBuilder. Functions are keyed by name,
    so a later definition replaces an earlier one with the same name. The
    module docstring and the first ``__main__`` guard are kept apart so the
    assembler can put them where Python needs them.
    """

    def __init__(self, entry_function_name: str = "main"):
        self.entry_function_name = entry_function_name

    def ingest(self, module: cst.Module) -> IngestedUnit:
        builder = ImportTableBuilder()
        unit = IngestedUnit(imports=builder.table)
        unit.header = module.with_changes(body=[], footer=[]).code.strip()
        unit.footer = module.with_changes(body=[], header=[]).code.strip()

        for index, stmt in enumerate(module.body):
            text = module.code_for_node(stmt)

            if index == 0 and is_docstring(stmt):
                unit.docstring = text
            elif is_import_line(stmt):
                builder.add(stmt, text)
            elif isinstance(stmt, cst.FunctionDef):
                self._add_function(unit, stmt.name.value, text)
            elif unit.entry_guard is None and is_main_guard(stmt):
                unit.entry_guard = text
            else:
                unit.other_items.append(OtherItem(text))

        logger.debug(
            f"Ingested {len(builder.table.statements)} imports, {len(unit.functions)} functions, "
            f"{len(unit.other_items)} other items (entry function: {unit.entry_function is not None})"
        )
        return unit

    def _add_function(self, unit: IngestedUnit, name: str, text: str) -> None:
        if name == self.entry_function_name:
            if unit.entry_function is not None:
                logger.debug(f"Entry function {name!r} redefined; keeping the later definition")
            unit.entry_function = FunctionUnit(name=name, body=text, is_entry=True)
            return

        if name in unit.functions:
            logger.debug(f"Function {name!r} redefined; keeping the later definition")
        unit.functions[name] = FunctionUnit(name=name, body=text)


def ingest_source(
    source: str,
    entry_function_name: str = "main",
    file_path: Optional[str] = None,
) -> IngestedUnit:
    """Parse ``source`` and ingest it in one step."""
    module = parse_compilation_unit(source, file_path=file_path)
    return UnitIngestor(entry_function_name).ingest(module)
