from __future__ import annotations

from pathlib import Path
from typing import Any

import fitz

from qcm_extract.ingest.text_normalize import normalize_whitespace

TEXT_BLOCK = 0


def extract_page_text_layout_aware(page: Any) -> str:
    """Page text in reading order: top to bottom, then left to right.

    Image blocks (sign pictures) are dropped; PyMuPDF reports them as
    ``<image: ...>`` placeholder text which would otherwise land in prompts.
    """
    blocks = [b for b in (page.get_text("blocks") or []) if len(b) >= 5 and (len(b) < 7 or b[6] == TEXT_BLOCK)]
    parts = [t for t in ((b[4] or "").strip() for b in sorted(blocks, key=lambda b: (float(b[1]), float(b[0])))) if t]
    if parts:
        return "\n".join(parts)
    return page.get_text("text") or ""


def read_text_layer(pdf_path: str | Path) -> list[str]:
    with fitz.open(str(pdf_path)) as doc:
        return [normalize_whitespace(extract_page_text_layout_aware(page)) for page in doc]


def render_page_png(pdf_path: str | Path, page_index: int, out_path: Path, dpi: int = 200) -> Path:
    with fitz.open(str(pdf_path)) as doc:
        pix = doc[page_index].get_pixmap(dpi=dpi, alpha=False)
        pix.save(str(out_path))
    return out_path


def non_space_length(text: str) -> int:
    return sum(1 for c in (text or "") if not c.isspace())
