"""Tarball extraction with path-safety checks."""

from pinfetch.core.archive.extractor import extract_tarball

__all__ = ["extract_tarball"]
