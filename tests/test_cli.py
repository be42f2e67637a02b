"""
Tests for the Command-Line Tools
================================

toyasm, toyrun and toydis, driven through click's CliRunner.
"""

import pytest
from click.testing import CliRunner

from toyasm.cli.errors import ExitCode
from toyasm.cli.tasm import main as toyasm_main
from toyasm.cli.tdis import main as toydis_main
from toyasm.cli.trun import main as toyrun_main


PROGRAM = """\
start:  ADD R0, #10
        ADD R0, #5
        NOP
        HALT
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's TOYASM_* settings out of the tests."""
    for name in ("TOYASM_ORIGIN", "TOYASM_ORG_LABELS", "TOYASM_STRICT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "prog.asm"
    path.write_text(PROGRAM)
    return path


# =============================================================================
# toyasm
# =============================================================================

class TestToyasmCLI:
    """Tests for the toyasm assembler CLI."""

    def test_help(self, runner):
        result = runner.invoke(toyasm_main, ["--help"])
        assert result.exit_code == 0
        assert "Assemble Toy16 source code" in result.output

    def test_version(self, runner):
        result = runner.invoke(toyasm_main, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_default_output_name(self, runner, source_file):
        result = runner.invoke(toyasm_main, [str(source_file)])
        output = source_file.with_suffix(".bin")
        assert result.exit_code == 0, result.output
        assert f"Wrote 12 bytes to {output}" in result.output
        assert output.read_bytes().hex(" ") == "00 29 0a 00 00 29 05 00 00 00 00 08"

    def test_all_outputs(self, runner, source_file, tmp_path):
        out = tmp_path / "out.bin"
        lst = tmp_path / "out.lst"
        sym = tmp_path / "out.sym"
        result = runner.invoke(
            toyasm_main,
            [str(source_file), "-o", str(out), "-l", str(lst), "-s", str(sym), "-v"],
        )
        assert result.exit_code == 0, result.output
        assert out.stat().st_size == 12
        assert "Toy16 Assembler Listing" in lst.read_text()
        assert "start 0x8000" in sym.read_text()
        assert "Assembly complete: 6 words at 0x8000" in result.output

    def test_origin_option(self, runner, source_file, tmp_path):
        sym = tmp_path / "prog.sym"
        result = runner.invoke(
            toyasm_main, [str(source_file), "--origin", "0x9000", "-s", str(sym)]
        )
        assert result.exit_code == 0, result.output
        assert "start 0x9000" in sym.read_text()

    def test_origin_from_environment(self, runner, source_file, tmp_path, monkeypatch):
        monkeypatch.setenv("TOYASM_ORIGIN", "0x1000")
        sym = tmp_path / "prog.sym"
        result = runner.invoke(toyasm_main, [str(source_file), "-s", str(sym)])
        assert result.exit_code == 0, result.output
        assert "start 0x1000" in sym.read_text()

    def test_bad_origin(self, runner, source_file):
        result = runner.invoke(toyasm_main, [str(source_file), "--origin", "0x10000"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_org_labels_option(self, runner, tmp_path):
        src = tmp_path / "org.asm"
        src.write_text("a: NOP\n.org a\nHALT\n")

        result = runner.invoke(toyasm_main, [str(src)])
        assert result.exit_code == ExitCode.BUILD_ERROR

        result = runner.invoke(toyasm_main, [str(src), "--org-labels"])
        assert result.exit_code == 0, result.output

    def test_strict_option(self, runner, tmp_path):
        src = tmp_path / "strict.asm"
        src.write_text("JMP nowhere\nFOO\n")

        result = runner.invoke(toyasm_main, [str(src)])
        assert "undefined symbol 'nowhere'" in result.output

        result = runner.invoke(toyasm_main, [str(src), "--strict"])
        assert "unsupported instruction 'FOO'" in result.output

    def test_assembly_error(self, runner, tmp_path):
        src = tmp_path / "bad.asm"
        src.write_text("NOP\nJMP lop\nloop: HALT\n")
        result = runner.invoke(toyasm_main, [str(src)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Assembly error:" in result.output
        assert "bad.asm:2:5: error: undefined symbol 'lop'" in result.output
        assert not src.with_suffix(".bin").exists()

    def test_missing_input(self, runner, tmp_path):
        result = runner.invoke(toyasm_main, [str(tmp_path / "missing.asm")])
        assert result.exit_code == 2

    def test_refuses_to_overwrite_input(self, runner, tmp_path):
        src = tmp_path / "prog.bin"
        src.write_text("HALT\n")
        result = runner.invoke(toyasm_main, [str(src)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert src.read_text() == "HALT\n"


# =============================================================================
# toyrun
# =============================================================================

class TestToyrunCLI:
    """Tests for the toyrun CLI."""

    @pytest.fixture
    def image(self, runner, source_file):
        runner.invoke(toyasm_main, [str(source_file)])
        return source_file.with_suffix(".bin")

    def test_run_prints_registers(self, runner, image):
        result = runner.invoke(toyrun_main, [str(image)])
        assert result.exit_code == 0, result.output
        assert "R0=0x000F" in result.output

    def test_verbose(self, runner, image):
        result = runner.invoke(toyrun_main, [str(image), "-v"])
        assert "Loaded 6 words at 0x8000" in result.output
        assert "Halted after 4 steps" in result.output

    def test_trace(self, runner, image):
        result = runner.invoke(toyrun_main, [str(image), "--trace"])
        assert result.exit_code == 0, result.output
        assert "8000: ADD R0, #0x000A" in result.output
        assert "8005: HALT" in result.output

    def test_step_limit(self, runner, tmp_path):
        image = tmp_path / "spin.bin"
        image.write_bytes(bytes([0x00, 0x6D, 0xFE, 0xFF]))
        result = runner.invoke(toyrun_main, [str(image), "--max-steps", "10"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "step limit of 10 reached" in result.output

    def test_illegal_instruction(self, runner, tmp_path):
        image = tmp_path / "bad.bin"
        image.write_bytes(bytes([0x00, 0xF8]))
        result = runner.invoke(toyrun_main, [str(image)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Execution error:" in result.output

    def test_odd_image(self, runner, tmp_path):
        image = tmp_path / "odd.bin"
        image.write_bytes(b"\x00")
        result = runner.invoke(toyrun_main, [str(image)])
        assert result.exit_code == ExitCode.BUILD_ERROR


# =============================================================================
# toydis
# =============================================================================

class TestToydisCLI:
    """Tests for the toydis CLI."""

    def test_basic(self, runner, tmp_path):
        image = tmp_path / "loop.bin"
        image.write_bytes(bytes([0x00, 0x75, 0xFE, 0xFF]))
        result = runner.invoke(toydis_main, [str(image)])
        assert result.exit_code == 0, result.output
        assert "8000: 7500 FFFE  JZ 0x8000" in result.output

    def test_address_option(self, runner, tmp_path):
        image = tmp_path / "halt.bin"
        image.write_bytes(bytes([0x00, 0x08]))
        result = runner.invoke(toydis_main, [str(image), "-a", "0x100"])
        assert "0100: 0800" in result.output

    def test_symbol_file(self, runner, tmp_path):
        src = tmp_path / "loop.asm"
        src.write_text("loop: JZ loop\n")
        sym = tmp_path / "loop.sym"
        runner.invoke(toyasm_main, [str(src), "-s", str(sym)])

        result = runner.invoke(toydis_main, [str(src.with_suffix(".bin")), "-s", str(sym)])
        assert result.exit_code == 0, result.output
        assert "JZ loop" in result.output

    def test_output_file(self, runner, tmp_path):
        image = tmp_path / "nop.bin"
        image.write_bytes(bytes([0x00, 0x00]))
        out = tmp_path / "nop.dis"
        result = runner.invoke(toydis_main, [str(image), "-o", str(out)])
        assert result.exit_code == 0
        assert "NOP" in out.read_text()

    def test_odd_image(self, runner, tmp_path):
        image = tmp_path / "odd.bin"
        image.write_bytes(b"\x00")
        result = runner.invoke(toydis_main, [str(image)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_bad_symbol_file(self, runner, tmp_path):
        image = tmp_path / "nop.bin"
        image.write_bytes(bytes([0x00, 0x00]))
        sym = tmp_path / "bad.sym"
        sym.write_text("just-a-name\n")
        result = runner.invoke(toydis_main, [str(image), "-s", str(sym)])
        assert result.exit_code == ExitCode.INVALID_ARGS
