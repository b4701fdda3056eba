"""
Tests for unit ingestion.
"""

import pytest

from depsplit.errors import ParseError
from depsplit.splitting import ingest_source, parse_compilation_unit


SOURCE = '''\
"""Module docstring."""

import os
import json; import sys

LIMIT = 10


def helper():
    return os.getcwd()


class Thing:
    pass


def helper():
    return json.dumps({})


def main():
    helper()


if __name__ == "__main__":
    main()
'''


class TestParse:
    """Tests for the parser interface."""

    def test_valid_source(self):
        module = parse_compilation_unit("x = 1\n")
        assert len(module.body) == 1

    def test_invalid_source_raises_parse_error(self):
        with pytest.raises(ParseError) as exc_info:
            parse_compilation_unit("def broken(:\n    pass\n", file_path="broken.py")
        assert exc_info.value.file_path == "broken.py"
        assert "broken.py" in str(exc_info.value)


class TestUnitIngestor:
    """Tests for sorting top-level statements into buckets."""

    def test_buckets(self):
        unit = ingest_source(SOURCE)

        assert [s.text.strip() for s in unit.imports.statements] == [
            "import os",
            "import json; import sys",
        ]
        assert list(unit.functions) == ["helper"]
        assert unit.entry_function is not None
        assert unit.entry_function.is_entry
        assert [i.text.strip() for i in unit.other_items] == [
            "LIMIT = 10",
            "class Thing:\n    pass",
        ]

    def test_later_function_overwrites_earlier(self):
        unit = ingest_source(SOURCE)
        assert "json.dumps" in unit.functions["helper"].body
        assert "os.getcwd" not in unit.functions["helper"].body

    def test_docstring_and_guard_are_kept_apart(self):
        unit = ingest_source(SOURCE)
        assert unit.docstring.strip() == '"""Module docstring."""'
        assert unit.entry_guard.strip().startswith('if __name__ == "__main__":')
        assert all("__main__" not in i.text for i in unit.other_items)

    def test_semicolon_import_line_introduces_every_name(self):
        unit = ingest_source(SOURCE)
        assert unit.imports.statements[1].introduced_names == ("json", "sys")

    def test_mixed_line_is_an_other_item(self):
        unit = ingest_source("import os; x = 1\n")
        assert unit.imports.statements == []
        assert [i.text.strip() for i in unit.other_items] == ["import os; x = 1"]

    def test_custom_entry_name(self):
        unit = ingest_source("def run():\n    pass\n\ndef main():\n    pass\n", entry_function_name="run")
        assert unit.entry_function.name == "run"
        assert list(unit.functions) == ["main"]

    def test_async_function_is_a_function(self):
        unit = ingest_source("async def poll():\n    pass\n")
        assert list(unit.functions) == ["poll"]

    def test_no_entry_function(self):
        unit = ingest_source("def f():\n    pass\n")
        assert unit.entry_function is None
        assert unit.entry_guard is None

    def test_only_first_guard_is_the_entry_guard(self):
        source = (
            'if __name__ == "__main__":\n    print(1)\n'
            "if __name__ == '__main__':\n    print(2)\n"
        )
        unit = ingest_source(source)
        assert "print(1)" in unit.entry_guard
        assert len(unit.other_items) == 1
        assert "print(2)" in unit.other_items[0].text

    def test_comments_stay_with_their_function(self):
        unit = ingest_source("import os\n\n# Returns the cwd.\n@cache\ndef cwd():\n    return os.getcwd()\n")
        body = unit.functions["cwd"].body
        assert "# Returns the cwd." in body
        assert "@cache" in body
