"""
Turn a saved portal page (or the text/html flavour of the clipboard) into the
tab-separated text a plain copy-paste of the table would have produced.

Cells are joined with tabs and rows with newlines; a cell holding several
<br>-separated values keeps them on separate lines, which reproduces the
interleaved multi-line layout the UFL parser expects.
"""
from __future__ import annotations

from pathlib import Path
from typing import List

from bs4 import BeautifulSoup, Tag  # type: ignore[import]


def _row_text(tr: Tag) -> str:
    cells = tr.find_all(["td", "th"], recursive=False)
    return "\t".join(c.get_text(separator="\n", strip=True) for c in cells)


def html_to_text(
    html_path: str | Path | None = None,
    html_content: str | None = None,
) -> str:
    """
    Flatten every data row (a <tr> with at least one <td>) of every table.

    :param html_path: Path to a saved HTML page.
    :param html_content: Raw HTML string (alternative to html_path).
    """
    if html_content is not None:
        html = html_content
    elif html_path is not None:
        html = Path(html_path).read_text(encoding="utf-8", errors="ignore")
    else:
        raise ValueError("Provide either html_path or html_content.")

    soup = BeautifulSoup(html, "html.parser")
    lines: List[str] = []
    for tr in soup.find_all("tr"):
        if not tr.find("td", recursive=False):
            continue
        text = _row_text(tr)
        if text.strip():
            lines.append(text)
    return "\n".join(lines)


def looks_like_html(text: str) -> bool:
    head = (text or "").lstrip()[:200].lower()
    return head.startswith("<") and ("<table" in text.lower() or "<html" in head)
