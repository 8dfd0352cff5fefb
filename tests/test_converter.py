"""Tests for md2html.renderers.html — block events to an HTML page."""

from __future__ import annotations

from typing import List

import pytest

from md2html.errors import ConfigurationError
from md2html.pipeline import process
from md2html.renderers.html import SOFT_HYPHEN


def body(source: str) -> List[str]:
    lines = process("t", source).splitlines()
    return lines[lines.index("<body>") + 1 : lines.index("</body>")]


# ── blocks ──────────────────────────────────────────────────────────


class TestBlocks:
    def test_code_block_is_escaped_and_labelled(self) -> None:
        assert body("```html\n<b>x</b>\n```\n") == [
            '  <pre><code class="language-html">&lt;b&gt;x&lt;/b&gt;</code></pre>'
        ]

    def test_nested_and_mixed_lists(self) -> None:
        assert body("- a\n- b\n  - c\n1. one\n") == [
            "  <ul>",
            "    <li>a</li>",
            "    <li>b",
            "      <ul>",
            "        <li>c</li>",
            "      </ul>",
            "    </li>",
            "  </ul>",
            "  <ol>",
            "    <li>one</li>",
            "  </ol>",
        ]

    def test_ordered_list_start(self) -> None:
        assert body("3. three\n4. four\n")[0] == '  <ol start="3">'

    def test_blank_line_keeps_list_open(self) -> None:
        lines = body("- a\n\n- b\n\nAfter\n")
        assert lines.count("  <ul>") == 1
        assert lines[-1] == "  <p>After</p>"

    def test_blockquote_paragraphs_and_nesting(self) -> None:
        assert body("> a\n> b\n>\n> c\n>> d\n") == [
            "  <blockquote>",
            "    <p>a b</p>",
            "    <p>c</p>",
            "    <blockquote>",
            "      <p>d</p>",
            "    </blockquote>",
            "  </blockquote>",
        ]

    def test_horizontal_rule(self) -> None:
        assert body("a\n\n---\n\nb\n") == ["  <p>a</p>", "  <hr>", "  <p>b</p>"]


# ── inline markup ───────────────────────────────────────────────────


class TestInline:
    def test_emphasis_code_and_strike(self) -> None:
        (line,) = body("Use `x<y`, **bold**, *it*, _also_ and ~~gone~~.\n")
        assert line == (
            "  <p>Use <code>x&lt;y</code>, <strong>bold</strong>, <em>it</em>,"
            " <em>also</em> and <del>gone</del>.</p>"
        )

    def test_links_and_images(self) -> None:
        (line,) = body('See [the *site*](http://e.com "Home") ![pic](a.png)\n')
        assert line == (
            '  <p>See <a href="http://e.com" title="Home">the <em>site</em></a>'
            ' <img src="a.png" alt="pic"></p>'
        )

    def test_snake_case_is_left_alone(self) -> None:
        assert body("call snake_case_name now\n") == ["  <p>call snake_case_name now</p>"]


# ── styles ──────────────────────────────────────────────────────────


class TestStyles:
    def test_style_update_restyles_previous_heading(self) -> None:
        assert body("# Title\n{: .right}\n") == ['  <h1 style="text-align: right">Title</h1>']

    def test_paragraph_margins(self) -> None:
        assert body("{: .center margin=2}\nText\n") == [
            '  <p style="text-align: center; margin-left: 2em; margin-right: 2em">Text</p>'
        ]

    def test_style_update_after_blank_line(self) -> None:
        assert body("Text\n\n{: .center}\n") == ['  <p style="text-align: center">Text</p>']


# ── frontmatter features ────────────────────────────────────────────


class TestHyphenation:
    def test_soft_hyphens_in_prose_only(self) -> None:
        source = "---\nhyphenate: true\n---\nextraordinary `extraordinary`\n"
        (line,) = body(source)
        prose, code = line.split("<code>")
        assert SOFT_HYPHEN in prose
        assert prose.replace(SOFT_HYPHEN, "") == "  <p>extraordinary "
        assert SOFT_HYPHEN not in code

    def test_headings_are_not_hyphenated(self) -> None:
        (line,) = body("---\nhyphenate: yes\n---\n# extraordinary\n")
        assert line == "  <h1>extraordinary</h1>"

    def test_unknown_language(self) -> None:
        with pytest.raises(ConfigurationError):
            process("t", "---\nhyphenate: true\nhyphen_lang: zz_ZZ\n---\ntext\n")


class TestFigletHeadings:
    def test_banner_replaces_heading(self) -> None:
        lines = body("---\nfiglet_headings: true\n---\n# Hi\n")
        assert lines[0].startswith('  <pre class="figlet" role="heading" aria-level="1" aria-label="Hi">')
        assert lines[-1].endswith("</pre>")

    def test_deep_headings_stay_plain(self) -> None:
        assert body("---\nfiglet_headings: true\n---\n#### Small\n") == ["  <h4>Small</h4>"]

    def test_unknown_font_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            process("t", "---\nfiglet_headings: true\nh1_font: no-such-font\n---\n# Hi\n")

    def test_unknown_font_falls_back(self) -> None:
        source = "---\nfiglet_headings: true\nh1_font: no-such-font\nfiglet_fallback: true\n---\n# Hi\n"
        assert body(source) == ["  <h1>Hi</h1>"]
