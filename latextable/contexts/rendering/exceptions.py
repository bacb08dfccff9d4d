"""Custom exceptions for the rendering context (preview template and external tools)."""

from pathlib import Path
from typing import Optional


class ExternalToolMissingError(RuntimeError):
    """
    Exception raised when a required external program is not installed.

    Attributes:
        tool: Executable name (e.g., 'pdflatex')
        purpose: What the tool is needed for
    """

    def __init__(self, tool: str, purpose: str):
        self.tool = tool
        self.purpose = purpose
        super().__init__(
            f"'{tool}' not found on PATH (needed for {purpose}). "
            "Install it or point the corresponding environment variable at it."
        )


class ExternalToolFailedError(RuntimeError):
    """
    Exception raised when an external program exits unsuccessfully or times out.

    Attributes:
        message: Error description
        tool: Executable name
        returncode: Exit status (None on timeout)
        output: Combined stdout/stderr reported by the tool
    """

    def __init__(
        self,
        message: str,
        tool: str,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        self.message = message
        self.tool = tool
        self.returncode = returncode
        self.output = output

        parts = [message]
        if returncode is not None:
            parts.append(f"{tool} exited with status {returncode}")
        if output:
            parts.append(f"The following output was reported:\n{output}")

        super().__init__("\n".join(parts))


class PreviewTemplateError(ValueError):
    """
    Exception raised when a preview template lacks its BEGIN/END PREVIEW markers.

    Attributes:
        message: Error description
        template_path: Template file, when known
    """

    def __init__(self, message: str, template_path: Optional[Path] = None):
        self.message = message
        self.template_path = template_path

        parts = [message]
        if template_path:
            parts.append(f"Template: {template_path}")

        super().__init__("\n".join(parts))
