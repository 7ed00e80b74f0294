"""Tests for the source-side model."""

from crosswalk.model import Problem, Severity, SourceNode, SourceUnit


SOURCE = "package demo;\n\nclass A {\n  int x;\n}\n"


class TestLineNumbers:
    """Offset to line mapping."""

    def test_first_line(self):
        unit = SourceUnit(path="A.src", root=SourceNode("compilation_unit"), source=SOURCE)
        assert unit.line_number(0) == 1

    def test_offset_after_newlines(self):
        unit = SourceUnit(path="A.src", root=SourceNode("compilation_unit"), source=SOURCE)
        offset = SOURCE.index("int x")
        assert unit.line_number(offset) == 4

    def test_unknown_offset(self):
        unit = SourceUnit(path="A.src", root=SourceNode("compilation_unit"), source=SOURCE)
        assert unit.line_number(-1) == 0

    def test_no_source_text(self):
        unit = SourceUnit(path="A.src", root=SourceNode("compilation_unit"))
        assert unit.line_number(10) == 0

    def test_explicit_line_attribute_wins(self):
        unit = SourceUnit(path="A.src", root=SourceNode("compilation_unit"), source=SOURCE)
        node = SourceNode("field", "x", start=0, attributes={"line": 7})
        assert unit.line_of(node) == 7


class TestProblems:
    """Problem helpers on units."""

    def test_errors_filters_warnings(self):
        error = Problem(Severity.ERROR, "bad", "A.src", 2)
        warning = Problem(Severity.WARNING, "meh", "A.src", 3)
        unit = SourceUnit(
            path="A.src",
            root=SourceNode("compilation_unit"),
            problems=(warning, error),
        )

        assert unit.errors == [error]
        assert unit.has_errors

    def test_warnings_only_is_not_erroneous(self):
        unit = SourceUnit(
            path="A.src",
            root=SourceNode("compilation_unit"),
            problems=(Problem(Severity.WARNING, "meh", "A.src", 3),),
        )
        assert not unit.has_errors

    def test_format_line(self):
        problem = Problem(Severity.ERROR, "missing ';'", "src/B.src", 4)
        assert problem.format_line() == "src/B.src(4): missing ';'"


class TestSourceNode:
    """Node traversal."""

    def test_walk_is_depth_first(self):
        tree = SourceNode(
            "class",
            "A",
            children=(
                SourceNode("field", "x"),
                SourceNode("method", "m", children=(SourceNode("return"),)),
            ),
        )
        assert [n.kind for n in tree.walk()] == ["class", "field", "method", "return"]

    def test_end_offset(self):
        assert SourceNode("field", start=10, length=5).end == 15
        assert SourceNode("field").end == -1
