"""
Output Assembler

Builds the raw text of each generated module and of the reassembled entry
file. Nothing here formats or writes; the texts are handed to the formatter
by the caller.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .models import (
    EntryFile,
    FunctionUnit,
    Group,
    IngestedUnit,
    ModuleArtifact,
    SplitPlan,
)

logger = logging.getLogger(__name__)


def join_blocks(blocks: Iterable[Optional[str]]) -> str:
    """Join source blocks with one blank line between them."""
    parts = [b.strip("\r\n") for b in blocks if b and b.strip()]
    return "\n\n".join(parts) + "\n" if parts else ""


class OutputAssembler:
    """
    Assembles module artifacts and the entry file for one ingested unit.

    Args:
        entry_file_name: File name of the reassembled entry file
        module_suffix: Appended to a group identifier to form its module name
    """

    def __init__(self, entry_file_name: str = "tmp_main.py", module_suffix: str = "_mod"):
        self.entry_file_name = entry_file_name
        self.module_suffix = module_suffix

    @property
    def entry_module_name(self) -> str:
        return self.entry_file_name[: -len(".py")] if self.entry_file_name.endswith(".py") else self.entry_file_name

    def module_name_for(self, group: Group) -> str:
        return f"{group.identifier}{self.module_suffix}"

    def build_module(self, group: Group, unit: IngestedUnit) -> ModuleArtifact:
        module_name = self.module_name_for(group)
        future = [s.text for s in unit.imports.future_statements]
        imports = [s.text for s in group.relevant_imports]

        body = join_blocks(
            future
            + [f"from {self.entry_module_name} import *"]
            + imports
            + [f.body for f in group.members]
        )
        names = ", ".join(group.member_names)

        return ModuleArtifact(
            file_name=f"{module_name}.py",
            module_name=module_name,
            declaration_statement=f"import {module_name}",
            reexport_statement=f"from {module_name} import {names}",
            body_text=body,
            group_key=group.key,
        )

    def registration_block(self) -> str:
        """
        Alias the running entry module under its importable name.

        Generated modules import the entry module by name. When the entry file
        runs as a script it lives in sys.modules as __main__, and without this
        alias each module import would load a second copy of it.
        """
        return (
            "import sys\n\n"
            f'sys.modules.setdefault("{self.entry_module_name}", sys.modules[__name__])'
        )

    def namespace_block(self, artifacts: Sequence[ModuleArtifact]) -> str:
        """
        Share the complete entry namespace with every generated module.

        Runs after the re-exports, so each module can see functions of other
        groups and underscore-prefixed names that the wildcard preamble skips.
        """
        names = ", ".join(a.module_name for a in artifacts)
        if len(artifacts) == 1:
            names += ","
        return (
            f"for _module in ({names}):\n"
            "    _module.__dict__.update(\n"
            '        {k: v for k, v in globals().items() if not k.startswith("__")}\n'
            "    )"
        )

    def build_entry_file(
        self,
        unit: IngestedUnit,
        artifacts: Sequence[ModuleArtifact],
        inline_functions: Sequence[FunctionUnit] = (),
    ) -> EntryFile:
        statements = unit.imports.statements
        future = [s.text for s in statements if s.is_future]
        regular = [s.text for s in statements if not s.is_future]

        blocks: List[Optional[str]] = [unit.header, unit.docstring]
        blocks += future + regular
        blocks += [item.text for item in unit.other_items]
        if artifacts:
            blocks.append(self.registration_block())
        blocks += [a.declaration_statement for a in artifacts]
        blocks += [a.reexport_statement for a in artifacts]
        if artifacts:
            blocks.append(self.namespace_block(artifacts))
        blocks += [f.body for f in inline_functions]
        if unit.entry_function is not None:
            blocks.append(unit.entry_function.body)
        blocks += [unit.entry_guard, unit.footer]

        return EntryFile(file_name=self.entry_file_name, body_text=join_blocks(blocks))

    def assemble(self, unit: IngestedUnit, groups: Sequence[Group], collapsed: bool) -> SplitPlan:
        """
        Build every output text for a run.

        Args:
            unit: The ingested compilation unit
            groups: Groups in emission order
            collapsed: True when all functions are general and stay inline

        Returns:
            SplitPlan with module artifacts (none when collapsed) and the entry file
        """
        if collapsed:
            inline = [f for g in groups for f in g.members]
            artifacts: List[ModuleArtifact] = []
            logger.info("No function uses any import; keeping all functions inline")
        else:
            inline = []
            artifacts = [self.build_module(g, unit) for g in groups]

        entry = self.build_entry_file(unit, artifacts, inline)
        return SplitPlan(
            groups=list(groups),
            artifacts=artifacts,
            entry_file=entry,
            inline_functions=inline,
            collapsed=collapsed,
        )
