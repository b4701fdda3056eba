"""
Terminal output for the depsplit CLI.

Renders a split result as a rich table, or as plain text when rich output is
turned off.
"""

from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .splitting.splitter import SplitResult


class RichOutputManager:
    """Manages rich terminal output with a plain-text mode."""

    def __init__(self, use_rich: bool = True, console: Optional[Console] = None):
        """Initialize the output manager."""
        self.use_rich = use_rich
        self.console = console or Console(
            no_color=not use_rich, highlight=use_rich, emoji=use_rich
        )

    def print_success(self, message: str) -> None:
        """Print a success message."""
        if self.use_rich:
            self.console.print(f"[green]✓[/green] {message}")
        else:
            self.console.print(f"✓ {message}", markup=False)

    def print_info(self, message: str) -> None:
        """Print an info message."""
        if self.use_rich:
            self.console.print(f"[blue]ℹ[/blue] {message}")
        else:
            self.console.print(f"ℹ {message}", markup=False)

    def create_table(self, title: str, columns: List[str]) -> Table:
        """Create a table; plain mode drops the box drawing."""
        if self.use_rich:
            table = Table(title=title, show_header=True, header_style="bold blue")
        else:
            table = Table(title=title, show_header=True, box=None, header_style="")
        for column in columns:
            table.add_column(column)
        return table

    def print_split_result(self, result: SplitResult) -> None:
        """Print the groups of a split run and the files they map to."""
        plan = result.plan
        table = self.create_table(
            f"Split of {result.input_path.name}", ["Group", "Imports used", "Functions", "File"]
        )

        if plan.collapsed:
            group = plan.groups[0]
            table.add_row(group.key, "-", ", ".join(group.member_names), plan.entry_file.file_name)
        else:
            for group, artifact in zip(plan.groups, plan.artifacts):
                table.add_row(
                    group.key,
                    ", ".join(sorted(group.usage_set)) or "-",
                    ", ".join(group.member_names),
                    artifact.file_name,
                )
        if plan.groups:
            self.console.print(table)

        if result.dry_run:
            planned = [a.file_name for a in plan.artifacts] + [plan.entry_file.file_name]
            self.print_info(f"Dry run, would write: {', '.join(planned)}")
        else:
            self.print_success(
                "Refactoring complete. Check the output files in the same directory "
                "as the input file."
            )
