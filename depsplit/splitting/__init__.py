"""
Dependency-usage splitting for depsplit.

Groups the top-level functions of one Python module by the imported namespaces
they use and writes each group to its own module.
"""

from .models import (
    EntryFile,
    FunctionUnit,
    Group,
    ImportStatement,
    ImportTable,
    IngestedUnit,
    ModuleArtifact,
    OtherItem,
    SplitPlan,
)
from .ingestion import UnitIngestor, ingest_source, parse_compilation_unit
from .import_table import ImportTableBuilder, introduced_names
from .usage_classifier import UsageClassifier, reparse_function
from .grouping import GroupAssigner, is_degenerate, sanitize_identifier
from .assembler import OutputAssembler
from .formatter import CodeFormatter
from .file_operations import FileOperations
from .splitter import DependencySplitter, SplitResult

__all__ = [
    # Models
    "EntryFile",
    "FunctionUnit",
    "Group",
    "ImportStatement",
    "ImportTable",
    "IngestedUnit",
    "ModuleArtifact",
    "OtherItem",
    "SplitPlan",
    # Pipeline stages
    "UnitIngestor",
    "ingest_source",
    "parse_compilation_unit",
    "ImportTableBuilder",
    "introduced_names",
    "UsageClassifier",
    "reparse_function",
    "GroupAssigner",
    "is_degenerate",
    "sanitize_identifier",
    "OutputAssembler",
    "CodeFormatter",
    "FileOperations",
    # Facade
    "DependencySplitter",
    "SplitResult",
]
