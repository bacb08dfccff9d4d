"""Unit tests for preview template injection."""

import numpy as np
import pytest

from latextable.contexts.rendering.exceptions import PreviewTemplateError
from latextable.contexts.rendering.preview_template import (
    PREVIEW_TEMPLATE_PATH,
    extract_preview_block,
    inject_preview,
    read_template,
    write_preview_document,
)
from latextable.contexts.templating import LatexTable

TEMPLATE = "\n".join(
    [
        r"\documentclass{standalone}",
        r"\begin{document}",
        "% BEGIN PREVIEW",
        "old content",
        "% END PREVIEW",
        r"\end{document}",
    ]
)


@pytest.mark.unit
def test_inject_replaces_block():
    document = inject_preview(TEMPLATE, "NEW")

    assert "old content" not in document
    assert document == "\n".join(
        [
            r"\documentclass{standalone}",
            r"\begin{document}",
            "% BEGIN PREVIEW",
            "",
            "NEW",
            "",
            "% END PREVIEW",
            r"\end{document}",
        ]
    )


@pytest.mark.unit
def test_round_trip_generated_table():
    """Extracting after injecting returns the generated LaTeX exactly."""
    text = LatexTable(np.array([[1.5, np.inf], [np.nan, -2.0]]), row_labels=["a", "b"]).make_table()

    assert extract_preview_block(inject_preview(TEMPLATE, text)) == text


@pytest.mark.unit
def test_round_trip_bmatrix():
    text = LatexTable(np.eye(3)).make_bmatrix()
    assert extract_preview_block(inject_preview(TEMPLATE, text)) == text


@pytest.mark.unit
def test_reinjection_replaces_previous_preview():
    first = inject_preview(TEMPLATE, "FIRST")
    second = inject_preview(first, "SECOND")

    assert "FIRST" not in second
    assert extract_preview_block(second) == "SECOND"
    assert second == inject_preview(TEMPLATE, "SECOND")


@pytest.mark.unit
def test_windows_line_endings():
    document = inject_preview(TEMPLATE.replace("\n", "\r\n"), "X")

    assert "\r" not in document
    assert extract_preview_block(document) == "X"


@pytest.mark.unit
def test_markers_may_carry_other_text():
    template = "%%%% BEGIN PREVIEW here %%%%\n%%%% END PREVIEW here %%%%"
    assert extract_preview_block(inject_preview(template, "X")) == "X"


@pytest.mark.unit
def test_missing_begin_marker():
    with pytest.raises(PreviewTemplateError, match="BEGIN PREVIEW"):
        inject_preview("no markers\n% END PREVIEW", "X")


@pytest.mark.unit
def test_end_marker_before_begin():
    with pytest.raises(PreviewTemplateError, match="END PREVIEW"):
        inject_preview("% END PREVIEW\n% BEGIN PREVIEW", "X")


@pytest.mark.unit
def test_shipped_template_has_markers():
    template = read_template()
    assert "BEGIN PREVIEW" in template
    assert "END PREVIEW" in template
    assert r"\usepackage{booktabs}" in template


@pytest.mark.unit
def test_write_preview_document_leaves_template_untouched(tmp_path):
    before = PREVIEW_TEMPLATE_PATH.read_text(encoding="utf-8")
    output = write_preview_document("PAYLOAD", tmp_path / "nested" / "preview.tex")

    assert output.exists()
    assert extract_preview_block(output.read_text(encoding="utf-8")) == "PAYLOAD"
    assert PREVIEW_TEMPLATE_PATH.read_text(encoding="utf-8") == before


@pytest.mark.unit
def test_write_preview_document_custom_template(tmp_path):
    template_path = tmp_path / "custom.tex"
    template_path.write_text(TEMPLATE, encoding="utf-8")

    output = write_preview_document("X", tmp_path / "out.tex", template_path=template_path)

    assert output.read_text(encoding="utf-8") == inject_preview(TEMPLATE, "X")
    assert template_path.read_text(encoding="utf-8") == TEMPLATE


@pytest.mark.unit
def test_write_preview_document_bad_template(tmp_path):
    template_path = tmp_path / "bad.tex"
    template_path.write_text("\\documentclass{article}\n", encoding="utf-8")

    with pytest.raises(PreviewTemplateError) as exc_info:
        write_preview_document("X", tmp_path / "out.tex", template_path=template_path)
    assert exc_info.value.template_path == template_path
    assert not (tmp_path / "out.tex").exists()
