"""Tests for output sinks."""

import io

import pytest

from crosswalk.pipeline import DirectoryOutputSink, MemoryOutputSink, StreamOutputSink
from crosswalk.render import OutputWriteError


class TestDirectoryOutputSink:
    """One file per unit."""

    def test_mirrors_relative_path(self, tmp_path):
        sink = DirectoryOutputSink(tmp_path)

        sink.write_unit("com/acme/Foo.java", "class Foo {}\n")

        target = tmp_path / "com" / "acme" / "Foo.cs"
        assert target.read_text() == "class Foo {}\n"

    def test_source_root_stripped(self, tmp_path):
        sink = DirectoryOutputSink(tmp_path / "out", source_root="src/main")
        assert sink.target_path("src/main/com/Foo.java") == tmp_path / "out" / "com" / "Foo.cs"

    def test_outside_source_root_uses_name(self, tmp_path):
        sink = DirectoryOutputSink(tmp_path, source_root="src/main")
        assert sink.target_path("lib/Bar.java") == tmp_path / "Bar.cs"

    def test_escaping_paths_flattened(self, tmp_path):
        sink = DirectoryOutputSink(tmp_path)
        assert sink.target_path("../other/Foo.java") == tmp_path / "Foo.cs"
        assert sink.target_path("/abs/Foo.java") == tmp_path / "Foo.cs"

    def test_custom_extension(self, tmp_path):
        sink = DirectoryOutputSink(tmp_path, extension=".txt")
        assert sink.target_path("Foo.java") == tmp_path / "Foo.txt"

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        sink = DirectoryOutputSink(tmp_path)
        sink.write_unit("Foo.java", "first\n")
        sink.write_unit("Foo.java", "second\n")

        assert (tmp_path / "Foo.cs").read_text() == "second\n"
        assert [p.name for p in tmp_path.iterdir()] == ["Foo.cs"]

    def test_unwritable_root(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        sink = DirectoryOutputSink(blocker)

        with pytest.raises(OutputWriteError) as exc_info:
            sink.write_unit("Foo.java", "text")
        assert exc_info.value.unit_path == "Foo.java"


class TestStreamOutputSink:
    """All units to one stream."""

    def test_appends_in_order(self):
        stream = io.StringIO()
        sink = StreamOutputSink(stream)
        sink.write_unit("A.src", "a\n")
        sink.write_unit("B.src", "b\n")
        assert stream.getvalue() == "a\nb\n"

    def test_closed_stream(self):
        class ClosedPipe(io.StringIO):
            def write(self, text):
                raise BrokenPipeError("closed")

        with pytest.raises(OutputWriteError):
            StreamOutputSink(ClosedPipe()).write_unit("A.src", "a\n")


def test_memory_sink():
    sink = MemoryOutputSink()
    sink.write_unit("A.src", "a")
    sink.write_unit("B.src", "b")
    assert sink.outputs == [("A.src", "a"), ("B.src", "b")]
    assert sink.texts["B.src"] == "b"
