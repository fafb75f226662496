"""HTML to plain text conversion using markdownify.

Renders an HTML (or storage-format XHTML) tree as readable plain text:
block elements start on their own lines and adjacent blocks are separated by
an empty line. List items get bullets or numbers, table rows render on one
line each, and links are followed by their target. Word wrapping is off
unless a width is given.

markdownify does the tree walk; the subclass below turns off markdown
syntax (emphasis, heading markers, fences, pipe tables) and adds the
Confluence-specific elements.
"""

import logging
import re
import textwrap
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag
from markdownify import MarkdownConverter as BaseMarkdownConverter, chomp

logger = logging.getLogger(__name__)

# Cell text is whitespace-normalized, and str.split() treats \x1f as
# whitespace, so the marker can never occur inside a cell
_CELL_END = '\x1f'

_EXTRA_NEWLINES = re.compile(r'\n{3,}')
_NEWLINE_RUN = re.compile(r'\s*\n\s*')


class _PlainTextMarkdownConverter(BaseMarkdownConverter):
    """markdownify converter that emits plain text instead of markdown."""

    def __init__(self, preserve_newlines: bool = True, **options):
        options.setdefault('bullets', '*')
        options.setdefault('escape_asterisks', False)
        options.setdefault('escape_underscores', False)
        options.setdefault('escape_misc', False)
        super().__init__(**options)
        self.preserve_newlines = preserve_newlines

    def process_text(self, el, parent_tags=None):
        text = super().process_text(el, parent_tags=parent_tags)
        if not self.preserve_newlines and 'pre' not in (parent_tags or ()):
            text = _NEWLINE_RUN.sub(' ', text)
        return text

    def _convert_block(self, el, text, parent_tags):
        if '_inline' in parent_tags:
            return ' ' + text.strip() + ' '
        text = text.strip('\n')
        return '\n\n%s\n\n' % text if text.strip() else ''

    def _convert_plain(self, el, text, parent_tags):
        return text

    def _convert_dropped(self, el, text, parent_tags):
        return ''

    convert_div = convert_section = convert_article = _convert_block
    convert_blockquote = convert_hr = convert_dd = convert_dt = _convert_block
    convert_ac_rich_text_body = convert_ac_layout = _convert_block
    convert_ac_layout_section = convert_ac_layout_cell = _convert_block
    convert_ac_task_list = convert_ac_task = _convert_block

    convert_b = convert_strong = convert_i = convert_em = _convert_plain
    convert_del = convert_s = convert_sub = convert_sup = _convert_plain
    convert_code = convert_kbd = convert_samp = _convert_plain
    convert_thead = convert_tbody = convert_tfoot = _convert_plain

    convert_script = convert_style = convert_head = _convert_dropped
    convert_title = convert_noscript = _convert_dropped
    # macro parameters and task bookkeeping carry no page text
    convert_ac_parameter = convert_ac_task_id = convert_ac_task_status = _convert_dropped

    def convert_hN(self, n, el, text, parent_tags):
        """Headings keep their text and case, without markers."""
        return self._convert_block(el, text, parent_tags)

    def convert_pre(self, el, text, parent_tags):
        """Preformatted text keeps its whitespace and gets no fence."""
        return '\n\n%s\n\n' % text if text else ''

    def convert_br(self, el, text, parent_tags):
        if '_inline' in parent_tags:
            return ' '
        return '\n'

    def convert_img(self, el, text, parent_tags):
        alt = (el.attrs.get('alt') or '').strip()
        return '[%s]' % alt if alt else ''

    def convert_a(self, el, text, parent_tags):
        """Render a link as its text followed by the target in brackets."""
        prefix, suffix, text = chomp(text)
        href = (el.get('href') or '').strip()
        if not href or href.startswith('#') or href in (text, 'mailto:' + text):
            return '%s%s%s' % (prefix, text, suffix)
        if not text:
            return '%s[%s]%s' % (prefix, href, suffix)
        return '%s%s [%s]%s' % (prefix, text, href, suffix)

    def convert_ac_link(self, el, text, parent_tags):
        """Confluence links without a body show the linked page title or file name."""
        if text.strip():
            return text
        # <ac:link><ri:page ri:content-title="..."/></ac:link> has no text of its own
        resource = el.find(['ri:page', 'ri:attachment', 'ri:blog-post'])
        if resource is None:
            return ''
        return resource.get('ri:content-title') or resource.get('ri:filename') or ''

    def convert_table(self, el, text, parent_tags):
        text = text.strip('\n')
        return '\n\n%s\n\n' % text if text else ''

    def convert_tr(self, el, text, parent_tags):
        cells = [cell.strip() for cell in text.split(_CELL_END)[:-1]]
        if not any(cells):
            return ''
        return '\n%s\n' % ' | '.join(cells)

    def convert_td(self, el, text, parent_tags):
        return ' '.join(text.split()) + _CELL_END

    convert_th = convert_td


class PlainTextConverter:
    """Converts HTML into plain text.

    Attributes:
        wordwrap: Maximum line width, or None to disable wrapping
        preserve_newlines: Keep newlines found in text nodes instead of
            collapsing them into spaces
    """

    def __init__(self, wordwrap: Optional[int] = None, preserve_newlines: bool = True):
        self.wordwrap = wordwrap
        self.preserve_newlines = preserve_newlines
        self.parser = "html.parser"
        self._converter = _PlainTextMarkdownConverter(preserve_newlines=preserve_newlines)

    def convert(self, html: Union[str, Tag]) -> str:
        """Convert an HTML string or an already parsed tree to text.

        Markup nested deeper than the interpreter's recursion limit is
        rendered as its flat text content, one string per line.
        """
        if isinstance(html, Tag):
            soup = html
        else:
            soup = BeautifulSoup(html or "", self.parser)

        try:
            text = self._converter.convert_soup(soup)
        except RecursionError:
            logger.warning("Markup is nested too deeply for structured conversion, using flat text")
            text = soup.get_text('\n')

        return self._finish(text)

    def _finish(self, text: str) -> str:
        text = text.replace('\xa0', ' ')
        text = '\n'.join(line.rstrip() for line in text.split('\n'))
        text = _EXTRA_NEWLINES.sub('\n\n', text).strip('\n')
        if self.wordwrap:
            text = '\n'.join(
                textwrap.fill(line, width=self.wordwrap) if len(line) > self.wordwrap else line
                for line in text.split('\n')
            )
        return text


def html_to_text(html: Union[str, Tag], wordwrap: Optional[int] = None,
                 preserve_newlines: bool = True) -> str:
    """Convert HTML to plain text with a one-off PlainTextConverter."""
    return PlainTextConverter(wordwrap=wordwrap, preserve_newlines=preserve_newlines).convert(html)
