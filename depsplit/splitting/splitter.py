"""
Dependency splitter.

Runs the whole single-pass pipeline for one compilation unit:
parse -> ingest -> classify -> group -> assemble -> format -> write.

Example:
    >>> splitter = DependencySplitter(DepSplitConfig.default())
    >>> result = splitter.split_file(Path("app.py"))
    >>> [p.name for p in result.written_files]
    ['requests_mod.py', 'general_mod.py', 'tmp_main.py']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config import DepSplitConfig
from ..errors import FormatterError
from .assembler import OutputAssembler
from .file_operations import FileOperations
from .formatter import CodeFormatter
from .grouping import GroupAssigner, is_degenerate
from .ingestion import UnitIngestor, parse_compilation_unit
from .models import SplitPlan
from .usage_classifier import UsageClassifier

logger = logging.getLogger(__name__)


@dataclass
class SplitResult:
    """Outcome of splitting one file."""

    input_path: Path
    plan: SplitPlan
    written_files: List[Path] = field(default_factory=list)
    dry_run: bool = False


class DependencySplitter:
    """
    Splits a Python module into per-dependency modules plus an entry file.

    Args:
        config: depsplit configuration; defaults are used when omitted
        formatter: Formatter to use instead of the one described by ``config``
    """

    def __init__(
        self,
        config: Optional[DepSplitConfig] = None,
        formatter: Optional[CodeFormatter] = None,
    ):
        self.config = config or DepSplitConfig.default()
        fmt = self.config.formatter
        self.formatter = formatter or CodeFormatter(
            command=fmt.command, timeout=fmt.timeout, enabled=fmt.enabled
        )

    def plan(self, source: str, file_path: Optional[str] = None) -> SplitPlan:
        """
        Compute all output texts for ``source`` without formatting or writing.

        Raises:
            ParseError: If the source does not parse
            ReparseError: If an isolated function does not parse on its own
            NamingCollisionError: On identifier collisions under the ``error`` policy
        """
        classification = self.config.classification
        output = self.config.output

        module = parse_compilation_unit(source, file_path=file_path)
        unit = UnitIngestor(classification.entry_function_name).ingest(module)

        classifier = UsageClassifier(unit.imports)
        functions = classifier.classify(unit.functions.values())

        assigner = GroupAssigner(
            unit.imports,
            naming=classification.group_naming,
            general_key=classification.general_group_key,
            on_collision=output.on_name_collision,
        )
        groups = assigner.assign(functions)
        collapsed = is_degenerate(groups)

        assembler = OutputAssembler(
            entry_file_name=output.entry_file_name,
            module_suffix=output.module_suffix,
        )
        plan = assembler.assemble(unit, groups, collapsed)
        logger.info(
            f"Planned {len(plan.artifacts)} module(s) from {len(functions)} function(s) "
            f"in {len(groups)} group(s)"
        )
        return plan

    def split_file(self, input_path: Path, dry_run: bool = False) -> SplitResult:
        """
        Split ``input_path`` and write the results next to it.

        Files are formatted and written one at a time, modules first and the
        entry file last. A failure part-way leaves earlier files on disk; the
        raised error lists them in ``written_files``.
        """
        input_path = Path(input_path)
        encoding = self.config.output.encoding
        source = FileOperations.read_source(input_path, encoding=encoding)
        plan = self.plan(source, file_path=str(input_path))
        result = SplitResult(input_path=input_path, plan=plan, dry_run=dry_run)

        if dry_run:
            logger.info("Dry run: nothing written")
            return result

        files = FileOperations(input_path.parent, encoding=encoding, logger=logger)
        for file_name, text in plan.iter_outputs():
            try:
                formatted = self.formatter.format(text, file_name)
            except FormatterError as e:
                e.written_files = list(files.written)
                raise
            files.write_text(file_name, formatted)

        result.written_files = list(files.written)
        return result
