"""
Unit tests for the compilation and preview pipeline.

External programs are replaced by fakes: shutil.which decides which tools are
"installed" and subprocess.run is swapped for a recorder that writes the files
the real tools would.
"""

import subprocess
from pathlib import Path

import pytest

from latextable.contexts.rendering import compiler
from latextable.contexts.rendering.compiler import (
    _parse_latex_log,
    compile_latex,
    convert_to_png,
    run_tool,
    tool_version,
)
from latextable.contexts.rendering.exceptions import (
    ExternalToolFailedError,
    ExternalToolMissingError,
)
from latextable.contexts.rendering.preview import render_preview
from latextable.contexts.rendering.preview_template import extract_preview_block

SAMPLE_LOG = r"""
This is pdfTeX, Version 3.141592653
! Undefined control sequence.
l.5 \foo
LaTeX Warning: Reference `tab:x' on page 1 undefined on input line 7.
Package caption Warning: Unused \captionsetup[table].
Overfull \hbox (12.3pt too wide) in paragraph at lines 3--4
"""


class FakeTools:
    """Stands in for pdflatex and ImageMagick."""

    def __init__(self, installed=("pdflatex", "magick"), compile_rc=0, write_pdf=True, convert_rc=0, log=""):
        self.installed = set(installed)
        self.compile_rc = compile_rc
        self.write_pdf = write_pdf
        self.convert_rc = convert_rc
        self.log = log
        self.calls = []

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.installed else None

    def run(self, cmd, cwd=None, timeout=None, **kwargs):
        self.calls.append(list(cmd))
        tool = cmd[0]
        if cmd[1] in ("--version", "-version"):
            return subprocess.CompletedProcess(cmd, 0, stdout=f"{tool} 1.0\nmore text\n")
        if tool == "pdflatex":
            output_dir = Path(next(c for c in cmd if c.startswith("-output-directory=")).split("=", 1)[1])
            stem = Path(cmd[-1]).stem
            if self.write_pdf:
                (output_dir / f"{stem}.pdf").write_bytes(b"%PDF-1.4 fake")
            (output_dir / f"{stem}.log").write_text(self.log, encoding="latin-1")
            (output_dir / f"{stem}.aux").write_text("", encoding="utf-8")
            return subprocess.CompletedProcess(cmd, self.compile_rc, stdout="compiler says hi\n")
        if tool == "magick":
            if self.convert_rc == 0:
                Path(cmd[-1]).write_bytes(b"\x89PNG fake")
            return subprocess.CompletedProcess(cmd, self.convert_rc, stdout="magick output\n")
        raise FileNotFoundError(tool)


@pytest.fixture
def fake_tools(monkeypatch):
    def install(**kwargs):
        tools = FakeTools(**kwargs)
        monkeypatch.setattr(compiler.shutil, "which", tools.which)
        monkeypatch.setattr(compiler.subprocess, "run", tools.run)
        return tools

    return install


@pytest.fixture
def tex_file(tmp_path):
    path = tmp_path / "doc.tex"
    path.write_text("\\documentclass{article}\\begin{document}x\\end{document}\n", encoding="utf-8")
    return path


@pytest.mark.unit
def test_parse_latex_log():
    errors, warnings = _parse_latex_log(SAMPLE_LOG)

    assert errors == ["Undefined control sequence."]
    assert len(warnings) == 3
    assert any("Reference `tab:x'" in w for w in warnings)
    assert any("12.3pt too wide" in w for w in warnings)


@pytest.mark.unit
def test_compile_latex_success(fake_tools, tex_file, tmp_path):
    tools = fake_tools(log="LaTeX Warning: Something minor.\n")
    result = compile_latex(tex_file, tmp_path / "out")

    assert result.success
    assert result.returncode == 0
    assert result.pdf_path == (tmp_path / "out" / "doc.pdf").resolve()
    assert result.warnings == ["Something minor."]
    assert result.output == "compiler says hi\n"

    cmd = tools.calls[0]
    assert cmd[0] == "pdflatex"
    assert "-interaction=nonstopmode" in cmd
    assert cmd[-1] == "doc.tex"


@pytest.mark.unit
def test_compile_latex_removes_artifacts(fake_tools, tex_file, tmp_path):
    fake_tools()
    compile_latex(tex_file, tmp_path / "out")

    assert not (tmp_path / "out" / "doc.aux").exists()
    assert not (tmp_path / "out" / "doc.log").exists()


@pytest.mark.unit
def test_compile_latex_keeps_artifacts(fake_tools, tex_file, tmp_path):
    fake_tools()
    compile_latex(tex_file, tmp_path / "out", keep_artifacts=True)

    assert (tmp_path / "out" / "doc.log").exists()


@pytest.mark.unit
def test_compile_latex_failure(fake_tools, tex_file, tmp_path):
    fake_tools(compile_rc=1, write_pdf=False, log=SAMPLE_LOG)
    result = compile_latex(tex_file, tmp_path / "out")

    assert result.success is False
    assert result.returncode == 1
    assert result.pdf_path is None
    assert result.errors == ["Undefined control sequence."]


@pytest.mark.unit
def test_compile_latex_nonzero_exit_with_pdf_is_failure(fake_tools, tex_file, tmp_path):
    fake_tools(compile_rc=1)
    result = compile_latex(tex_file, tmp_path / "out")

    assert result.success is False
    assert result.pdf_path is not None


@pytest.mark.unit
def test_compile_latex_missing_pdf_reported(fake_tools, tex_file, tmp_path):
    fake_tools(write_pdf=False)
    result = compile_latex(tex_file, tmp_path / "out")

    assert result.success is False
    assert result.errors == ["PDF file was not generated"]


@pytest.mark.unit
def test_compile_latex_stale_pdf_removed(fake_tools, tex_file, tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    (out / "doc.pdf").write_bytes(b"stale")
    fake_tools(compile_rc=1, write_pdf=False)

    result = compile_latex(tex_file, out)

    assert result.pdf_path is None
    assert not (out / "doc.pdf").exists()


@pytest.mark.unit
def test_compile_latex_missing_compiler(fake_tools, tex_file):
    fake_tools(installed=())
    with pytest.raises(ExternalToolMissingError) as exc_info:
        compile_latex(tex_file)
    assert exc_info.value.tool == "pdflatex"


@pytest.mark.unit
def test_compile_latex_missing_tex_file(fake_tools, tmp_path):
    fake_tools()
    with pytest.raises(FileNotFoundError):
        compile_latex(tmp_path / "missing.tex")


@pytest.mark.unit
def test_convert_to_png(fake_tools, tmp_path):
    tools = fake_tools()
    pdf = tmp_path / "doc.pdf"
    pdf.write_bytes(b"%PDF")

    png = convert_to_png(pdf, density=150)

    assert png == tmp_path / "doc.png"
    assert png.exists()
    assert tools.calls[0] == ["magick", "-density", "150", str(pdf), "+profile", "icc", str(png)]


@pytest.mark.unit
def test_convert_to_png_failure(fake_tools, tmp_path):
    fake_tools(convert_rc=1)
    pdf = tmp_path / "doc.pdf"
    pdf.write_bytes(b"%PDF")

    with pytest.raises(ExternalToolFailedError) as exc_info:
        convert_to_png(pdf)
    assert exc_info.value.returncode == 1
    assert "Conversion to PNG failed" in str(exc_info.value)
    assert "The following output was reported:\nmagick output" in str(exc_info.value)


@pytest.mark.unit
def test_convert_to_png_missing_converter(fake_tools, tmp_path):
    fake_tools(installed=("pdflatex",))
    with pytest.raises(ExternalToolMissingError):
        convert_to_png(tmp_path / "doc.pdf")


@pytest.mark.unit
def test_run_tool_timeout(monkeypatch):
    def slow(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"], output="partial")

    monkeypatch.setattr(compiler.subprocess, "run", slow)

    with pytest.raises(ExternalToolFailedError) as exc_info:
        run_tool(["pdflatex", "x.tex"], tool="pdflatex", failure_message="LaTeX compilation", timeout=5)
    assert exc_info.value.returncode is None
    assert "timed out after 5s" in str(exc_info.value)
    assert exc_info.value.output == "partial"


@pytest.mark.unit
def test_tool_version(fake_tools):
    fake_tools(installed=("pdflatex",))

    assert tool_version("pdflatex") == "pdflatex 1.0"
    assert tool_version("magick", "-version") is None


@pytest.mark.unit
def test_render_preview(fake_tools, tmp_path):
    fake_tools()
    result = render_preview("PAYLOAD", output_dir=tmp_path / "preview", log_dir=tmp_path / "logs")

    assert result.tex_path == tmp_path / "preview" / "preview.tex"
    assert extract_preview_block(result.tex_path.read_text(encoding="utf-8")) == "PAYLOAD"
    assert result.pdf_path.exists()
    assert result.image_path == tmp_path / "preview" / "preview.png"
    assert result.artifact == result.image_path
    assert result.log_file == tmp_path / "logs" / "preview.log"
    assert result.log_file.exists()


@pytest.mark.unit
def test_render_preview_without_converter(fake_tools, tmp_path):
    """The PDF is the preview when ImageMagick is missing."""
    tools = fake_tools(installed=("pdflatex",))
    result = render_preview("PAYLOAD", output_dir=tmp_path / "preview", log_dir=tmp_path / "logs")

    assert result.image_path is None
    assert result.artifact == result.pdf_path
    assert not any(call[0] == "magick" for call in tools.calls)


@pytest.mark.unit
def test_render_preview_missing_compiler(fake_tools, tmp_path):
    fake_tools(installed=("magick",))
    with pytest.raises(ExternalToolMissingError):
        render_preview("PAYLOAD", output_dir=tmp_path / "preview", log_dir=tmp_path / "logs")
    assert not (tmp_path / "preview" / "preview.tex").exists()


@pytest.mark.unit
def test_render_preview_compile_failure_skips_conversion(fake_tools, tmp_path):
    out = tmp_path / "preview"
    out.mkdir()
    (out / "preview.png").write_bytes(b"stale")
    tools = fake_tools(compile_rc=1, write_pdf=False, log=SAMPLE_LOG)

    with pytest.raises(ExternalToolFailedError) as exc_info:
        render_preview("PAYLOAD", output_dir=out, log_dir=tmp_path / "logs")

    assert "LaTeX compilation failed" in str(exc_info.value)
    assert "compiler says hi" in str(exc_info.value)
    assert not (out / "preview.png").exists()
    assert not any(call[0] == "magick" and "-density" in call for call in tools.calls)
