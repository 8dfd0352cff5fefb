from __future__ import annotations

from md2html.html_builder import Element, Text, element, page, render, text_content


def body_lines(html_text: str) -> list[str]:
    lines = html_text.splitlines()
    return lines[lines.index("<body>") + 1 : lines.index("</body>")]


def test_element_attribute_names_and_none_values() -> None:
    node = element("pre", "x", class_="figlet", aria_level="1", title=None)
    assert node.attributes == (("class", "figlet"), ("aria-level", "1"))
    assert node.children == (Text("x"),)


def test_text_and_attributes_are_escaped() -> None:
    html_text = render(page("t", [element("a", "1 < 2 & 3", href='x?a="b"')]))
    assert body_lines(html_text) == ['  <a href="x?a=&quot;b&quot;">1 &lt; 2 &amp; 3</a>']


def test_void_elements_have_no_closing_tag() -> None:
    html_text = render(page("t", [element("p", "a", element("br"), "b"), element("hr")]))
    assert body_lines(html_text) == ["  <p>a<br>b</p>", "  <hr>"]


def test_nested_blocks_are_indented() -> None:
    tree = element("ul", element("li", "one", element("ol", element("li", "two"))))
    assert body_lines(render(page("t", [tree]))) == [
        "  <ul>",
        "    <li>one",
        "      <ol>",
        "        <li>two</li>",
        "      </ol>",
        "    </li>",
        "  </ul>",
    ]


def test_head_contains_title_lang_and_stylesheet() -> None:
    html_text = render(page("Notes", [], lang="fr", stylesheet="a.css"))
    assert html_text.startswith("<!DOCTYPE html>\n<html lang=\"fr\">\n<head>\n")
    assert "  <title>Notes</title>\n" in html_text
    assert '  <link rel="stylesheet" href="a.css">\n' in html_text
    assert html_text.endswith("</body>\n</html>\n")


def test_text_content_flattens_tree() -> None:
    node = element("h1", "Hello ", element("em", "big"), " world")
    assert isinstance(node, Element)
    assert text_content(node) == "Hello big world"
