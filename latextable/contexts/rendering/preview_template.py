"""
Preview Template Handling

A preview template is a complete LaTeX document containing a line with
BEGIN PREVIEW and, after it, a line with END PREVIEW. Generated LaTeX is
placed between the two; everything else in the template is kept as is.
"""

import os
import re
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from latextable.contexts.rendering.exceptions import PreviewTemplateError

load_dotenv()
PREVIEW_TEMPLATE_PATH = Path(
    os.getenv("PREVIEW_TEMPLATE_PATH", Path(__file__).parent / "tex" / "preview.tex")
)

BEGIN_MARKER = "BEGIN PREVIEW"
END_MARKER = "END PREVIEW"

# Templates may come with Windows line endings
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def read_template(template_path: Optional[Path] = None) -> str:
    """Read a preview template (defaults to PREVIEW_TEMPLATE_PATH)."""
    if template_path is None:
        template_path = PREVIEW_TEMPLATE_PATH
    return Path(template_path).read_text(encoding="utf-8")


def _find_markers(lines: List[str]) -> Tuple[int, int]:
    """Index of the BEGIN line and of the first END line after it."""
    begin = next((i for i, line in enumerate(lines) if BEGIN_MARKER in line), None)
    if begin is None:
        raise PreviewTemplateError(f"No line containing '{BEGIN_MARKER}' found")

    end = next((i for i in range(begin + 1, len(lines)) if END_MARKER in lines[i]), None)
    if end is None:
        raise PreviewTemplateError(f"No line containing '{END_MARKER}' after '{BEGIN_MARKER}'")

    return begin, end


def inject_preview(template_text: str, payload: str) -> str:
    """
    Place generated LaTeX between the preview markers.

    Whatever sat between the markers before (e.g. a previous preview) is
    replaced. The payload is surrounded by one blank line on each side.

    Args:
        template_text: Full template document
        payload: Generated LaTeX

    Returns:
        Populated document

    Raises:
        PreviewTemplateError: If the markers are missing or out of order

    Example:
        >>> inject_preview("a\\n% BEGIN PREVIEW\\n% END PREVIEW\\nb", "X")
        'a\\n% BEGIN PREVIEW\\n\\nX\\n\\n% END PREVIEW\\nb'
    """
    lines = _LINE_BREAK.split(template_text)
    begin, end = _find_markers(lines)
    block = f"\n{payload}\n"
    return "\n".join(lines[: begin + 1] + [block] + lines[end:])


def extract_preview_block(document_text: str) -> str:
    """
    Recover the payload placed by inject_preview().

    Args:
        document_text: Populated document

    Returns:
        Text between the markers, without the surrounding blank lines
    """
    lines = _LINE_BREAK.split(document_text)
    begin, end = _find_markers(lines)
    block = "\n".join(lines[begin + 1 : end])
    if block.startswith("\n"):
        block = block[1:]
    if block.endswith("\n"):
        block = block[:-1]
    return block


def write_preview_document(
    payload: str,
    output_path: Path,
    template_path: Optional[Path] = None,
) -> Path:
    """
    Populate the template with payload and write it to output_path.

    The shipped template is never modified.

    Args:
        payload: Generated LaTeX
        output_path: Destination .tex file (parent directories are created)
        template_path: Optional template (defaults to PREVIEW_TEMPLATE_PATH)

    Returns:
        output_path
    """
    template_path = Path(template_path) if template_path is not None else PREVIEW_TEMPLATE_PATH
    try:
        document = inject_preview(read_template(template_path), payload)
    except PreviewTemplateError as e:
        raise PreviewTemplateError(e.message, template_path=template_path) from e

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(document, encoding="utf-8")
    return output_path
