"""Unit tests for content_converter.macro_extractor module."""

from confluence_loader.content_converter.macro_extractor import (
    ATTACHMENT_TOKEN,
    CodeBlock,
    MacroExtractor,
    placeholder_for,
)
from tests.fixtures import (
    SAMPLE_PAGE_WITH_ATTACHMENTS,
    SAMPLE_PAGE_WITH_CODE_BLOCKS,
    SAMPLE_PAGE_WITH_MACROS,
)


class TestCodeBlock:
    """Test cases for CodeBlock."""

    def test_to_markdown(self):
        """to_markdown fences the code with its language."""
        assert CodeBlock("python", "print(1)").to_markdown() == "```python\nprint(1)\n```"

    def test_to_markdown_without_language(self):
        """A block without language gets a bare fence."""
        assert CodeBlock("", "x").to_markdown() == "```\nx\n```"

    def test_placeholder_format(self):
        """Placeholders are numbered CODE_BLOCK_<n>."""
        assert placeholder_for(3) == "CODE_BLOCK_3"


class TestReplaceAttachments:
    """Test cases for MacroExtractor.replace_attachments."""

    def test_replaces_self_closing_and_body_macros(self):
        """Both attachments and view-file macros become the token."""
        extractor = MacroExtractor()
        soup = extractor.parse(SAMPLE_PAGE_WITH_ATTACHMENTS)

        count = extractor.replace_attachments(soup)

        assert count == 2
        assert str(soup).count(ATTACHMENT_TOKEN) == 2
        assert soup.find("ac:structured-macro") is None
        assert "report.pdf" not in str(soup)

    def test_self_closing_macro_does_not_swallow_siblings(self):
        """Text after a self-closing macro survives the replacement."""
        extractor = MacroExtractor()
        soup = extractor.parse('<ac:structured-macro ac:name="attachments" /><p>After</p>')

        extractor.replace_attachments(soup)

        assert soup.get_text() == "[ATTACHMENT]After"

    def test_leaves_other_macros(self):
        """Non-attachment macros are untouched."""
        extractor = MacroExtractor()
        soup = extractor.parse(SAMPLE_PAGE_WITH_MACROS)

        assert extractor.replace_attachments(soup) == 0
        assert soup.find("ac:structured-macro", attrs={"ac:name": "info"}) is not None


class TestExtractCodeBlocks:
    """Test cases for MacroExtractor.extract_code_blocks."""

    def test_extracts_blocks_in_order(self):
        """Code macros are extracted with language and stripped code."""
        extractor = MacroExtractor()
        soup = extractor.parse(SAMPLE_PAGE_WITH_CODE_BLOCKS)

        blocks = extractor.extract_code_blocks(soup)

        assert blocks == [
            CodeBlock(
                "python",
                'class Example:\n    def greet(self):\n        return "<b>Hello</b> & welcome"',
            ),
            CodeBlock("bash", "ls   -la    /tmp"),
        ]

    def test_replaces_macros_with_placeholders(self):
        """Each code macro is replaced by its placeholder on its own line."""
        extractor = MacroExtractor()
        soup = extractor.parse(SAMPLE_PAGE_WITH_CODE_BLOCKS)

        extractor.extract_code_blocks(soup)

        text = str(soup)
        assert "\nCODE_BLOCK_0\n" in text
        assert "\nCODE_BLOCK_1\n" in text
        assert "ac:plain-text-body" not in text

    def test_code_macro_without_language(self):
        """A code macro without a language parameter gets an empty language."""
        extractor = MacroExtractor()
        soup = extractor.parse(
            '<ac:structured-macro ac:name="code">'
            '<ac:plain-text-body><![CDATA[x = 1]]></ac:plain-text-body>'
            '</ac:structured-macro>'
        )

        assert extractor.extract_code_blocks(soup) == [CodeBlock("", "x = 1")]

    def test_noformat_macro_is_code(self):
        """A noformat macro is a code block even without a language."""
        extractor = MacroExtractor()
        soup = extractor.parse(
            '<ac:structured-macro ac:name="noformat">'
            '<ac:plain-text-body><![CDATA[  raw  text ]]></ac:plain-text-body>'
            '</ac:structured-macro>'
        )

        assert extractor.extract_code_blocks(soup) == [CodeBlock("", "raw  text")]

    def test_macro_without_body_is_left_alone(self):
        """A macro with a language but no plain-text body is not a code block."""
        extractor = MacroExtractor()
        soup = extractor.parse(
            '<ac:structured-macro ac:name="code">'
            '<ac:parameter ac:name="language">python</ac:parameter>'
            '</ac:structured-macro>'
        )

        assert extractor.extract_code_blocks(soup) == []
        assert soup.find("ac:structured-macro") is not None

    def test_other_plain_text_macros_are_left_alone(self):
        """Plain-text macros that are not code (e.g. html) pass through."""
        extractor = MacroExtractor()
        soup = extractor.parse(
            '<ac:structured-macro ac:name="html">'
            '<ac:plain-text-body><![CDATA[<div>raw</div>]]></ac:plain-text-body>'
            '</ac:structured-macro>'
        )

        assert extractor.extract_code_blocks(soup) == []

    def test_code_nested_in_panel(self):
        """Code macros inside other macros are found."""
        extractor = MacroExtractor()
        soup = extractor.parse(
            '<ac:structured-macro ac:name="expand"><ac:rich-text-body>'
            '<ac:structured-macro ac:name="code">'
            '<ac:parameter ac:name="language">java</ac:parameter>'
            '<ac:plain-text-body><![CDATA[int x;]]></ac:plain-text-body>'
            '</ac:structured-macro>'
            '</ac:rich-text-body></ac:structured-macro>'
        )

        assert extractor.extract_code_blocks(soup) == [CodeBlock("java", "int x;")]

    def test_split_cdata_sections_are_joined(self):
        """A CDATA section split around ]]> decodes to the original code."""
        extractor = MacroExtractor()
        soup = extractor.parse(
            '<ac:structured-macro ac:name="code">'
            '<ac:parameter ac:name="language">xml</ac:parameter>'
            '<ac:plain-text-body><![CDATA[a]]]]><![CDATA[>b]]></ac:plain-text-body>'
            '</ac:structured-macro>'
        )

        assert extractor.extract_code_blocks(soup) == [CodeBlock("xml", "a]]>b")]


class TestProcess:
    """Test cases for MacroExtractor.process."""

    def test_runs_both_passes(self):
        """process replaces attachments and extracts code."""
        extractor = MacroExtractor()
        html = (
            '<ac:structured-macro ac:name="view-file"><ac:parameter ac:name="name">'
            '<ri:attachment ri:filename="a.pdf" /></ac:parameter></ac:structured-macro>'
            '<ac:structured-macro ac:name="code"><ac:parameter ac:name="language">go</ac:parameter>'
            '<ac:plain-text-body><![CDATA[fmt.Println()]]></ac:plain-text-body></ac:structured-macro>'
        )

        soup, blocks = extractor.process(html)

        assert ATTACHMENT_TOKEN in str(soup)
        assert blocks == [CodeBlock("go", "fmt.Println()")]

    def test_malformed_markup_does_not_raise(self):
        """Unclosed macros are tolerated."""
        extractor = MacroExtractor()

        soup, blocks = extractor.process(
            '<p>Broken <ac:structured-macro ac:name="code"><ac:parameter ac:name="language">py'
        )

        assert blocks == []
        assert "Broken" in soup.get_text()

    def test_empty_input(self):
        """Empty or missing bodies produce an empty soup."""
        soup, blocks = MacroExtractor().process("")
        assert blocks == []
        assert soup.get_text() == ""
