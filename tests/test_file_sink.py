"""Tests for the file-backed byte sink."""

import pytest

from stubcraft.adapters.io.file_sink import TestFileSink
from stubcraft.ports.render_error import WriteError
from stubcraft.render.engine import RenderEngine


class TestFileSinkWriting:
    """Test opening, writing and error wrapping."""

    def test_writes_bytes_and_creates_parents(self, tmp_path):
        path = tmp_path / "calc" / "calc_test.go"

        with TestFileSink(path) as sink:
            sink.write(b"package calc\n")
            sink.write(b"\n")

        assert path.read_bytes() == b"package calc\n\n"
        assert sink.bytes_written == 14

    def test_append_mode(self, tmp_path):
        path = tmp_path / "calc_test.go"
        path.write_bytes(b"package calc\n")

        with TestFileSink(path, append=True) as sink:
            sink.write(b"// more\n")

        assert path.read_bytes() == b"package calc\n// more\n"

    def test_write_requires_open(self, tmp_path):
        with pytest.raises(WriteError, match="not open"):
            TestFileSink(tmp_path / "x_test.go").write(b"x")

    def test_open_failure_is_a_write_error(self, tmp_path):
        directory = tmp_path / "taken"
        directory.mkdir()

        with pytest.raises(WriteError) as exc_info:
            TestFileSink(directory).open()

        assert exc_info.value.path == str(directory)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_close_is_idempotent(self, tmp_path):
        sink = TestFileSink(tmp_path / "x_test.go").open()
        sink.close()
        sink.close()

    def test_engine_renders_into_file(self, tmp_path, header, double_function):
        path = tmp_path / "calc_test.go"
        engine = RenderEngine()

        with TestFileSink(path) as sink:
            engine.render_header(sink, header)
            engine.render_function(sink, double_function, header)

        content = path.read_text()
        assert content.startswith("package calc\n")
        assert "func TestDouble(t *testing.T) {" in content
        assert sink.bytes_written == len(content.encode("utf-8"))
