"""File header comments, chosen by file extension."""

from __future__ import annotations

import os
from types import MappingProxyType

HASH = "# file: {}"
SLASH = "// file: {}"
HTML = "<!-- file: {} -->"
CSS = "/* file: {} */"
DASH = "-- file: {}"
LISP = ";; file: {}"
BATCH = ":: file: {}"
FORTRAN = "! file: {}"

DEFAULT_HEADER = SLASH


def _styles(template: str, *extensions: str) -> dict[str, str]:
    return {ext: template for ext in extensions}


COMMENT_STYLES = MappingProxyType(
    {
        **_styles(
            HASH,
            ".py", ".rb", ".pl", ".pm", ".sh", ".bash", ".zsh", ".fish", ".tcl", ".r",
            ".yaml", ".yml", ".toml", ".ini", ".conf", ".cfg", ".properties", ".mk",
            ".makefile", ".ps1", ".psm1", ".psd1",
        ),
        **_styles(
            SLASH,
            ".js", ".ts", ".jsx", ".tsx", ".java", ".c", ".cc", ".cpp", ".cxx", ".h",
            ".hpp", ".hxx", ".cs", ".php", ".go", ".swift", ".kt", ".rs", ".scala",
            ".dart", ".groovy", ".d",
        ),
        **_styles(HTML, ".html", ".xml", ".svg", ".xaml", ".jsp", ".asp", ".aspx", ".jsf", ".vue"),
        **_styles(CSS, ".css", ".scss", ".sass", ".less"),
        **_styles(DASH, ".sql", ".hs", ".lhs", ".vhdl", ".vhd"),
        **_styles(LISP, ".lisp", ".cl", ".el", ".clj", ".cljs", ".cljc"),
        **_styles(BATCH, ".bat", ".cmd"),
        **_styles(FORTRAN, ".f", ".f90", ".f95", ".f03"),
    }
)


def file_header(path: str) -> str:
    """
    Return the header line (with trailing newline) for a file. Paths ending in
    `Makefile` or `makefile` use hash comments whatever their extension;
    unknown extensions get `//` comments.
    """
    if path.endswith(("Makefile", "makefile")):
        template = HASH
    else:
        ext = os.path.splitext(path)[1].lower()
        template = COMMENT_STYLES.get(ext, DEFAULT_HEADER)
    return template.format(path) + "\n"
