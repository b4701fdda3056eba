"""
Tests for the output assembler.
"""

from depsplit.splitting import (
    GroupAssigner,
    OutputAssembler,
    UsageClassifier,
    ingest_source,
    is_degenerate,
)
from depsplit.splitting.assembler import join_blocks

SOURCE = '''\
"""Tool."""

from __future__ import annotations

import net
import json

TIMEOUT = 5


def fetch(url):
    return net.get(url, timeout=TIMEOUT)


def _decode(raw):
    return json.loads(raw)


def add(a, b):
    return a + b


def main():
    print(add(1, 2), _decode(fetch("x")))


if __name__ == "__main__":
    main()
'''


def build_plan(source=SOURCE, **assembler_kwargs):
    unit = ingest_source(source)
    functions = UsageClassifier(unit.imports).classify(unit.functions.values())
    groups = GroupAssigner(unit.imports).assign(functions)
    return OutputAssembler(**assembler_kwargs).assemble(unit, groups, is_degenerate(groups))


class TestJoinBlocks:
    """Tests for join_blocks."""

    def test_blank_line_between_blocks(self):
        assert join_blocks(["\na = 1\n", None, "", "b = 2\n\n"]) == "a = 1\n\nb = 2\n"

    def test_empty(self):
        assert join_blocks([None, "  "]) == ""


class TestModuleArtifacts:
    """Tests for generated module bodies."""

    def test_one_artifact_per_group(self):
        plan = build_plan()
        assert [a.file_name for a in plan.artifacts] == ["net_mod.py", "json_mod.py", "general_mod.py"]
        assert not plan.collapsed

    def test_module_body_order(self):
        artifact = build_plan().artifacts[0]
        text = artifact.body_text

        assert text.startswith("from __future__ import annotations\n\nfrom tmp_main import *\n\nimport net\n")
        assert text.index("import net") < text.index("def fetch(url):")
        assert "import json" not in text

    def test_declaration_and_reexport(self):
        artifact = build_plan().artifacts[1]
        assert artifact.declaration_statement == "import json_mod"
        assert artifact.reexport_statement == "from json_mod import _decode"

    def test_custom_names(self):
        plan = build_plan(entry_file_name="app_main.py", module_suffix="_part")
        assert plan.entry_file.file_name == "app_main.py"
        assert plan.artifacts[0].file_name == "net_part.py"
        assert "from app_main import *" in plan.artifacts[0].body_text


class TestEntryFile:
    """Tests for the reassembled entry file."""

    def test_fixed_order(self):
        text = build_plan().entry_file.body_text
        markers = [
            '"""Tool."""',
            "from __future__ import annotations",
            "import net",
            "import json",
            "TIMEOUT = 5",
            'sys.modules.setdefault("tmp_main", sys.modules[__name__])',
            "import net_mod",
            "import general_mod",
            "from net_mod import fetch",
            "from general_mod import add",
            "for _module in (net_mod, json_mod, general_mod):",
            "def main():",
            'if __name__ == "__main__":',
        ]
        positions = [text.index(m) for m in markers]
        assert positions == sorted(positions)

    def test_functions_are_not_inline(self):
        text = build_plan().entry_file.body_text
        for name in ("fetch", "_decode", "add"):
            assert f"def {name}(" not in text

    def test_collapse_keeps_functions_inline(self):
        source = "import os\n\ndef add(a, b):\n    return a + b\n\ndef main():\n    add(1, 2)\n"
        plan = build_plan(source)
        text = plan.entry_file.body_text

        assert plan.collapsed
        assert plan.artifacts == []
        assert [f.name for f in plan.inline_functions] == ["add"]
        assert text.index("import os") < text.index("def add(") < text.index("def main():")
        assert "_mod" not in text

    def test_entry_file_without_entry_function(self):
        plan = build_plan("import os\n\ndef cwd():\n    return os.getcwd()\n")
        assert plan.entry_file.body_text == (
            "import os\n"
            "\n"
            "import sys\n"
            "\n"
            'sys.modules.setdefault("tmp_main", sys.modules[__name__])\n'
            "\n"
            "import os_mod\n"
            "\n"
            "from os_mod import cwd\n"
            "\n"
            "for _module in (os_mod,):\n"
            "    _module.__dict__.update(\n"
            '        {k: v for k, v in globals().items() if not k.startswith("__")}\n'
            "    )\n"
        )

    def test_entry_module_alias_uses_entry_file_name(self):
        text = build_plan(entry_file_name="app_main.py").entry_file.body_text
        assert 'sys.modules.setdefault("app_main", sys.modules[__name__])' in text

    def test_collapsed_entry_has_no_module_wiring(self):
        source = "def add(a, b):\n    return a + b\n\ndef main():\n    add(1, 2)\n"
        text = build_plan(source).entry_file.body_text
        assert "sys.modules" not in text
        assert "_module" not in text
