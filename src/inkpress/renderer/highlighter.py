"""Syntax highlighting for fenced code blocks."""

import logging
from html import escape

from pygments import highlight as pygments_highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from inkpress.config.models import SUPPORTED_LANGUAGES, RenderConfig
from inkpress.config.settings import get_default_render_config
from inkpress.renderer.lazy import SingleFlight

logger = logging.getLogger(__name__)


class RendererError(Exception):
    """Base class for rendering pipeline failures."""

    pass


class HighlighterInitError(RendererError):
    """Raised when the highlighter cannot load its style or lexers."""

    pass


def plain_code_block(code: str) -> str:
    """Wrap escaped code in an unstyled preformatted block."""
    return f"<pre><code>{escape(code)}</code></pre>"


class Highlighter:
    """Pygments-backed highlighter with a fixed theme and language allow-list."""

    def __init__(
        self,
        theme: str = "one-dark",
        languages: dict[str, str] | None = None,
    ) -> None:
        """
        Load the style and every allow-listed lexer.

        Args:
            theme: Pygments style name
            languages: Fence alias to Pygments lexer name mapping

        Raises:
            HighlighterInitError: If the style or a lexer is unavailable
        """
        self.theme = theme
        aliases = languages if languages is not None else SUPPORTED_LANGUAGES

        try:
            self._formatter = HtmlFormatter(style=theme, noclasses=True)
            self._lexers: dict[str, Lexer] = {
                alias.lower(): get_lexer_by_name(lexer_name)
                for alias, lexer_name in aliases.items()
            }
        except ClassNotFound as e:
            raise HighlighterInitError(f"Cannot load highlighter data: {e}") from e

        logger.debug(f"Loaded {len(self._lexers)} lexers with theme {theme}")

    @classmethod
    def from_config(cls, config: RenderConfig) -> "Highlighter":
        """Create a highlighter using the theme and allow-list of a render config."""
        return cls(theme=config.syntax_theme, languages=config.languages)

    @property
    def languages(self) -> frozenset[str]:
        """Fence aliases that receive highlighting."""
        return frozenset(self._lexers)

    def supports(self, lang: str | None) -> bool:
        """Check whether ``lang`` is on the allow-list."""
        return (lang or "").strip().lower() in self._lexers

    def highlight(self, code: str, lang: str | None) -> str:
        """
        Highlight code for a fenced block.

        Args:
            code: Source code from the fence
            lang: Fence language tag, possibly empty

        Returns:
            Themed HTML, or an escaped plain block for unknown languages
            and highlighting failures
        """
        lexer = self._lexers.get((lang or "").strip().lower())
        if lexer is None:
            return plain_code_block(code)

        try:
            return pygments_highlight(code, lexer, self._formatter)
        except Exception:
            logger.warning(f"Highlighting failed for language {lang!r}", exc_info=True)
            return plain_code_block(code)


def _build_default_highlighter() -> Highlighter:
    try:
        return Highlighter.from_config(get_default_render_config())
    except HighlighterInitError:
        logger.error("Highlighter initialization failed", exc_info=True)
        raise


_highlighter = SingleFlight(_build_default_highlighter, name="highlighter")


def get_highlighter() -> Highlighter:
    """Return the process-wide highlighter."""
    return _highlighter.get()


async def aget_highlighter() -> Highlighter:
    """Return the process-wide highlighter from a coroutine."""
    return await _highlighter.aget()


def highlighter_ready() -> bool:
    """Whether the process-wide highlighter has been built."""
    return _highlighter.initialized
