"""Tests for the command line and embedding surfaces."""

import io
import sys
import pytest

from ztarcc import main as cli
from ztarcc.embed import convert_codes
from ztarcc.errors import InputEncodingError

from conftest import BUNDLED_DICTIONARY


class TestConvertCodes:
    """Tests for the embeddable function."""

    def test_convert(self, whole_converter):
        """Test joined output for valid codes."""
        result = convert_codes("cn", "tw", "他们是勇敢的士兵", converter=whole_converter)
        assert result == "他們是勇敢的士兵"

    def test_invalid_from(self, whole_converter):
        """Test the error string for an unknown source code."""
        with pytest.raises(ValueError) as exc_info:
            convert_codes("jp", "tw", "文字", converter=whole_converter)
        assert str(exc_info.value) == "invalid from script jp"

    def test_invalid_to(self, whole_converter):
        """Test the error string for an unknown target code."""
        with pytest.raises(ValueError) as exc_info:
            convert_codes("cn", "st", "文字", converter=whole_converter)
        assert str(exc_info.value) == "invalid to script st"


class TestDecodeInput:
    """Tests for source encoding handling."""

    def test_utf8(self):
        """Test plain UTF-8."""
        assert cli.decode_input("他们\n".encode("utf-8")) == "他们\n"

    def test_utf8_bom(self):
        """Test that a UTF-8 BOM is dropped."""
        assert cli.decode_input("\ufeff他们".encode("utf-8")) == "他们"

    def test_empty(self):
        """Test empty input."""
        assert cli.decode_input(b"") == ""

    def test_big5(self):
        """Test Traditional text encoded as Big5."""
        text = "我能吞下玻璃而不傷身體。\n他們是勇敢的士兵\n"
        assert cli.decode_input(text.encode("big5")) == text

    def test_gb18030(self):
        """Test Simplified text encoded as GB18030."""
        text = "我能吞下玻璃而不伤身体。\n他们是勇敢的士兵\n"
        assert cli.decode_input(text.encode("gb18030")) == text

    def test_undetectable(self, monkeypatch):
        """Test InputEncodingError when detection finds nothing."""

        class NoMatch:
            def best(self):
                return None

        monkeypatch.setattr(cli, "from_bytes", lambda data, **kwargs: NoMatch())
        with pytest.raises(InputEncodingError):
            cli.decode_input(b"\xff\xfe\xfd")


class TestBuildMain:
    """Tests for ztarcc-build."""

    def test_build(self, tmp_path, capsys):
        """Test compiling the bundled tables."""
        output_dir = tmp_path / "compiled"
        code = cli.build_main([
            "--source-dir", str(BUNDLED_DICTIONARY),
            "--output-dir", str(output_dir),
        ])
        assert code == 0
        assert (output_dir / "manifest.json").exists()
        err = capsys.readouterr().err
        assert "FromChina" in err
        assert "Done!" in err

    def test_quiet(self, tmp_path, capsys):
        """Test that --quiet prints nothing on success."""
        code = cli.build_main([
            "--source-dir", str(BUNDLED_DICTIONARY),
            "--output-dir", str(tmp_path / "compiled"),
            "--quiet",
        ])
        assert code == 0
        assert capsys.readouterr().err == ""

    def test_build_error(self, tmp_path, capsys):
        """Test exit code on a missing source directory."""
        code = cli.build_main([
            "--source-dir", str(tmp_path / "nope"),
            "--output-dir", str(tmp_path / "compiled"),
            "-q",
        ])
        assert code == 1
        assert "ERROR" in capsys.readouterr().err


class TestMain:
    """Tests for the ztarcc converter CLI."""

    def test_files(self, compiled_dir, tmp_path):
        """Test converting a file into a file."""
        source = tmp_path / "in.txt"
        target = tmp_path / "out.txt"
        source.write_text("我能吞下玻璃而不伤身体。\n他们是勇敢的士兵\n", encoding="utf-8")

        code = cli.main([
            str(source), str(target),
            "--from", "cn", "--to", "tw",
            "--dict-dir", str(compiled_dir),
        ])
        assert code == 0
        assert target.read_text(encoding="utf-8") == (
            "我能吞下玻璃而不傷身體。\n他們是勇敢的士兵\n"
        )

    def test_streams(self, compiled_dir, monkeypatch, capsys):
        """Test "-" for standard input and output."""
        stdin = io.TextIOWrapper(io.BytesIO("头发".encode("utf-8")), encoding="utf-8")
        monkeypatch.setattr(sys, "stdin", stdin)

        code = cli.main(["-", "-", "-f", "cn", "-t", "hk", "-d", str(compiled_dir), "-w", "1"])
        assert code == 0
        assert capsys.readouterr().out == "頭髮"

    def test_missing_dictionaries(self, tmp_path, capsys):
        """Test exit code when nothing was compiled."""
        source = tmp_path / "in.txt"
        source.write_text("他们", encoding="utf-8")
        code = cli.main([str(source), "-", "--dict-dir", str(tmp_path / "none")])
        assert code == 1
        assert "ztarcc-build" in capsys.readouterr().err

    def test_invalid_script(self, compiled_dir):
        """Test that argparse rejects unknown codes."""
        with pytest.raises(SystemExit):
            cli.main(["-", "-", "--from", "st", "--dict-dir", str(compiled_dir)])

    def test_gb18030_file(self, compiled_dir, tmp_path):
        """Test converting a GB18030 file; output is always UTF-8."""
        source = tmp_path / "in.txt"
        target = tmp_path / "out.txt"
        source.write_bytes(
            "我能吞下玻璃而不伤身体。\n他们是勇敢的士兵\n".encode("gb18030")
        )

        code = cli.main([
            str(source), str(target), "-f", "cn", "-t", "tw", "-d", str(compiled_dir),
        ])
        assert code == 0
        assert target.read_text(encoding="utf-8") == (
            "我能吞下玻璃而不傷身體。\n他們是勇敢的士兵\n"
        )

    def test_workers_zero(self, compiled_dir, tmp_path):
        """Test that 0 workers means the executor default."""
        source = tmp_path / "in.txt"
        target = tmp_path / "out.txt"
        source.write_text("他们\n头发\n", encoding="utf-8")

        code = cli.main([
            str(source), str(target), "-f", "cn", "-t", "tw", "-d", str(compiled_dir), "-w", "0",
        ])
        assert code == 0
        assert target.read_text(encoding="utf-8") == "他們\n頭髮\n"

    def test_workers_negative(self, compiled_dir):
        """Test that argparse rejects a negative worker count."""
        with pytest.raises(SystemExit):
            cli.main(["-", "-", "-d", str(compiled_dir), "-w", "-2"])

    def test_stdout_utf8_on_ascii_locale(self, compiled_dir, tmp_path, monkeypatch):
        """Test that standard output is UTF-8 whatever its text encoding."""
        source = tmp_path / "in.txt"
        source.write_text("头发", encoding="utf-8")
        raw = io.BytesIO()
        monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(raw, encoding="ascii"))

        code = cli.main([str(source), "-", "-t", "hk", "-d", str(compiled_dir)])
        assert code == 0
        assert raw.getvalue().decode("utf-8") == "頭髮"
