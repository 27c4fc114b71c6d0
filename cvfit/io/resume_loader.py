from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pypdf import PdfReader

from cvfit.config import LOG_PREFIX


@dataclass(frozen=True)
class LoadedResume:
    text: str
    source: str  # "text" | "pdf" | "none"
    path: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.source != "none"


def _warn(message: str) -> None:
    print(f"{LOG_PREFIX} WARNING: {message}", file=sys.stderr)


def _read_pdf_text(path: Path) -> str:
    reader = PdfReader(str(path))
    pages = []
    for page in reader.pages:
        t = page.extract_text() or ""
        if t.strip():
            pages.append(t)
    return "\n".join(pages).strip()


def load_resume_text(*, resume_text_path: Optional[str], resume_pdf_path: Optional[str]) -> LoadedResume:
    """
    Load CV text from disk to use as a profile's experience text.

    Precedence:
      1) resume_text_path (.txt, or a .json CV document kept verbatim)
      2) resume_pdf_path (.pdf, text extracted page by page)
      3) none
    Best-effort: unreadable files print a warning and return source='none'.
    """
    if resume_text_path:
        p = Path(resume_text_path)
        try:
            return LoadedResume(text=p.read_text(encoding="utf-8"), source="text", path=str(p))
        except (OSError, UnicodeDecodeError) as exc:
            _warn(f"could not read resume text {p}: {exc}")
            return LoadedResume(text="", source="none", path=str(p))

    if resume_pdf_path:
        p = Path(resume_pdf_path)
        try:
            text = _read_pdf_text(p)
        except Exception as exc:
            _warn(f"could not read resume PDF {p}: {exc}")
            return LoadedResume(text="", source="none", path=str(p))
        if not text:
            _warn(f"resume PDF {p} has no extractable text")
            return LoadedResume(text="", source="none", path=str(p))
        return LoadedResume(text=text, source="pdf", path=str(p))

    return LoadedResume(text="", source="none", path=None)
