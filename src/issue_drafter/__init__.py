"""Turn screenshots, PDFs and pasted notes into reviewable issue drafts."""

__version__ = "0.1.0"
