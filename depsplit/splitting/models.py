"""
Data models for dependency-usage splitting.

Represents the buckets produced from one compilation unit (imports, functions,
other items), the import table, the groups functions are clustered into, and
the generated files. All of them live for a single run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class ImportStatement:
    """A top-level import line, kept verbatim."""

    text: str
    introduced_names: Tuple[str, ...]
    position: int
    is_future: bool = False


class ImportTable:
    """
    Maps each introduced name to the import statement that introduces it.

    Keeps every statement in source order as well, since a name redefined by a
    later import only replaces the table entry, never the statement itself.
    """

    def __init__(self) -> None:
        self._by_name: Dict[str, ImportStatement] = {}
        self._statements: List[ImportStatement] = []

    def add(self, statement: ImportStatement) -> None:
        self._statements.append(statement)
        for name in statement.introduced_names:
            # last writer wins
            self._by_name[name] = statement

    def lookup(self, name: str) -> Optional[ImportStatement]:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @property
    def statements(self) -> List[ImportStatement]:
        return list(self._statements)

    @property
    def future_statements(self) -> List[ImportStatement]:
        return [s for s in self._statements if s.is_future]

    def statements_for(self, names: FrozenSet[str]) -> List[ImportStatement]:
        """Return the owning statements of ``names``, deduplicated, in source order."""
        owners = {self._by_name[n].position: self._by_name[n] for n in names if n in self._by_name}
        return [owners[pos] for pos in sorted(owners)]


@dataclass
class FunctionUnit:
    """A top-level function definition."""

    name: str
    body: str
    usage_set: FrozenSet[str] = frozenset()
    is_entry: bool = False


@dataclass(frozen=True)
class OtherItem:
    """Any top-level statement that is neither an import nor a function."""

    text: str


@dataclass
class IngestedUnit:
    """The buckets of one compilation unit, in source order."""

    imports: ImportTable = field(default_factory=ImportTable)
    functions: Dict[str, FunctionUnit] = field(default_factory=dict)
    entry_function: Optional[FunctionUnit] = None
    other_items: List[OtherItem] = field(default_factory=list)
    header: str = ""
    footer: str = ""
    docstring: Optional[str] = None
    entry_guard: Optional[str] = None


@dataclass
class Group:
    """Functions sharing one usage set."""

    key: str
    usage_set: FrozenSet[str]
    members: List[FunctionUnit] = field(default_factory=list)
    relevant_imports: List[ImportStatement] = field(default_factory=list)
    identifier: str = ""

    @property
    def is_general(self) -> bool:
        return not self.usage_set

    @property
    def member_names(self) -> List[str]:
        return [f.name for f in self.members]


@dataclass(frozen=True)
class ModuleArtifact:
    """One generated module file for a retained group."""

    file_name: str
    module_name: str
    declaration_statement: str
    reexport_statement: str
    body_text: str
    group_key: str


@dataclass(frozen=True)
class EntryFile:
    """The reassembled entry file."""

    file_name: str
    body_text: str


@dataclass
class SplitPlan:
    """Everything a run produces before anything is formatted or written."""

    groups: List[Group]
    artifacts: List[ModuleArtifact]
    entry_file: EntryFile
    inline_functions: List[FunctionUnit] = field(default_factory=list)
    collapsed: bool = False

    def iter_outputs(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(file_name, raw_text)`` in write order: modules first, entry file last."""
        for artifact in self.artifacts:
            yield artifact.file_name, artifact.body_text
        yield self.entry_file.file_name, self.entry_file.body_text
