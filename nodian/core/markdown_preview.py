# nodian/core/markdown_preview.py
from functools import cached_property
from typing import Optional, Sequence

import markdown
from loguru import logger

DEFAULT_EXTENSIONS = ("tables", "fenced_code", "sane_lists")


class MarkdownRenderer:
    """Renders Markdown buffers to HTML for the document preview."""

    def __init__(self, extensions: Optional[Sequence[str]] = None):
        self.extensions = list(extensions) if extensions is not None else list(DEFAULT_EXTENSIONS)

    @cached_property
    def _converter(self) -> markdown.Markdown:
        logger.debug(f"Creating Markdown converter with extensions: {self.extensions}")
        return markdown.Markdown(extensions=self.extensions)

    def render(self, text: str) -> str:
        # Converter instances carry per-document state between calls
        self._converter.reset()
        return self._converter.convert(text)

    __call__ = render


_default_renderer: Optional[MarkdownRenderer] = None

def render_markdown(text: str) -> str:
    """Renders `text` with the default extensions."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = MarkdownRenderer()
    return _default_renderer.render(text)
