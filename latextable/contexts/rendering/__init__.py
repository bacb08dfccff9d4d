"""
Rendering Context

Responsibilities:
- Injects generated LaTeX into the preview template
- Compiles the preview document to PDF
- Converts the PDF to a PNG image
- Reports external tool failures with their captured output

Owns: preview template handling, external compiler/converter invocation
Never: Changes generated LaTeX
"""

from latextable.contexts.rendering.compiler import (
    CompilationResult,
    compile_latex,
    convert_to_png,
)
from latextable.contexts.rendering.preview import PreviewResult, render_preview
from latextable.contexts.rendering.preview_template import (
    extract_preview_block,
    inject_preview,
    write_preview_document,
)

__all__ = [
    "CompilationResult",
    "compile_latex",
    "convert_to_png",
    "PreviewResult",
    "render_preview",
    "inject_preview",
    "extract_preview_block",
    "write_preview_document",
]
