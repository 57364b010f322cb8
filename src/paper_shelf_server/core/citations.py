"""
Citation export formatting.

Renders paper records as BibTeX, RIS or APA text. Everything here is a
pure string transform: the result is handed to an export writer to be
saved, nothing is read from or written to storage.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Union

from .models import CitationExport, CitationFormat, PaperRecord

UNKNOWN_AUTHOR = "Unknown"
NO_DATE = "n.d."
DEFAULT_EXPORT_NAME = "papers"


def _authors_or_unknown(paper: PaperRecord) -> list[str]:
    return list(paper.authors) if paper.authors else [UNKNOWN_AUTHOR]


def to_bibtex(paper: PaperRecord, index: int) -> str:
    """Render one paper as an @article entry keyed paper<index>."""
    lines = [
        f"@article{{paper{index},",
        f"  title = {{{paper.title}}},",
        f"  author = {{{' and '.join(_authors_or_unknown(paper))}}},",
    ]
    if paper.publication_year is not None:
        lines.append(f"  year = {{{paper.publication_year}}},")
    if paper.journal:
        lines.append(f"  journal = {{{paper.journal}}},")
    lines.append("}")
    return "\n".join(lines) + "\n"


def to_ris(paper: PaperRecord) -> str:
    """Render one paper as a RIS record ending with ER."""
    lines = ["TY  - JOUR", f"TI  - {paper.title}"]
    lines.extend(f"AU  - {author}" for author in _authors_or_unknown(paper))
    if paper.journal:
        lines.append(f"JO  - {paper.journal}")
    if paper.publication_year is not None:
        lines.append(f"PY  - {paper.publication_year}")
    lines.append("ER  -")
    return "\n".join(lines)


def to_apa(paper: PaperRecord) -> str:
    """Render one paper as an APA-style reference."""
    authors = ", ".join(_authors_or_unknown(paper))
    year = paper.publication_year if paper.publication_year is not None else NO_DATE
    return f"{authors} ({year}). {paper.title}. {paper.journal or ''}"


_RENDERERS: dict[CitationFormat, Callable[[PaperRecord, int], str]] = {
    CitationFormat.BIBTEX: to_bibtex,
    CitationFormat.RIS: lambda paper, _index: to_ris(paper),
    CitationFormat.APA: lambda paper, _index: to_apa(paper),
}

# BibTeX entries already end with a newline
_SEPARATORS = {
    CitationFormat.BIBTEX: "\n",
    CitationFormat.RIS: "\n\n",
    CitationFormat.APA: "\n\n",
}


def format_citations(
    papers: Sequence[PaperRecord],
    fmt: Union[CitationFormat, str],
) -> str:
    """
    Render papers in the given format, in input order.

    Entries are separated by a blank line.

    Raises:
        ValueError: If fmt is not a supported format.
    """
    citation_format = CitationFormat.parse(fmt)
    render = _RENDERERS[citation_format]
    entries = [render(paper, i) for i, paper in enumerate(papers, 1)]
    return _SEPARATORS[citation_format].join(entries)


def export_filename(list_name: Optional[str], fmt: Union[CitationFormat, str]) -> str:
    """File name for an export, e.g. 'My List-citations.bib'."""
    citation_format = CitationFormat.parse(fmt)
    base = (list_name or "").strip() or DEFAULT_EXPORT_NAME
    return f"{base}-citations.{citation_format.extension}"


def build_export(
    papers: Sequence[PaperRecord],
    fmt: Union[CitationFormat, str],
    list_name: Optional[str] = None,
) -> Optional[CitationExport]:
    """
    Build a citation file for a list of papers.

    Returns:
        The export, or None when there are no papers to export.

    Raises:
        ValueError: If fmt is not a supported format.
    """
    citation_format = CitationFormat.parse(fmt)
    if not papers:
        return None

    return CitationExport(
        filename=export_filename(list_name, citation_format),
        content=format_citations(papers, citation_format),
        paper_count=len(papers),
    )
