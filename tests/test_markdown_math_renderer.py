from soma_exam.core.markdown_math_renderer import (
    MarkdownMathRenderer,
    MathSpan,
    auto_wrap_latex,
    combine_superscripts,
    extract_math,
    normalize_math_text,
    unescape_latex,
)


def test_combine_superscripts():
    assert combine_superscripts("x²") == "x^{2}"
    assert combine_superscripts("e⁻²ⁿ") == "e^{-2n}"
    assert combine_superscripts("plain") == "plain"


def test_auto_wrap_only_touches_bare_latex():
    assert auto_wrap_latex("\\frac{1}{2}") == "\\(\\frac{1}{2}\\)"
    assert auto_wrap_latex("x^{2} + 1") == "\\(x^{2} + 1\\)"
    assert auto_wrap_latex("already $\\frac{1}{2}$") == "already $\\frac{1}{2}$"
    assert auto_wrap_latex("no maths here") == "no maths here"


def test_normalize_converts_unicode_symbols():
    normalized = normalize_math_text("a ≤ b²")
    assert normalized.startswith("\\(") and normalized.endswith("\\)")
    assert "\\leq" in normalized
    assert "b^{2}" in normalized


def test_normalize_wraps_each_paragraph_separately():
    text = "Simplify the expression below.\n\n\\frac{6}{8}"
    assert normalize_math_text(text) == "Simplify the expression below.\n\n\\(\\frac{6}{8}\\)"


def test_unescape_latex_keeps_row_breaks():
    assert unescape_latex("\\\\frac{1}{2}") == "\\frac{1}{2}"
    assert unescape_latex("\\\\(x\\\\)") == "\\(x\\)"
    assert unescape_latex("a \\\\ b") == "a \\\\ b"


def test_render_fragment_unescapes_uploaded_latex():
    html = MarkdownMathRenderer().render_fragment("Compute \\\\(\\\\frac{1}{2}\\\\)")
    assert "\\(\\frac{1}{2}\\)" in html


def test_extract_math_replaces_spans_with_placeholders():
    source, spans = extract_math("Area is $x_1$ and \\[y^2\\] or \\(z\\)")

    assert source == "Area is SOMAMATH0X and SOMAMATH1X or SOMAMATH2X"
    assert spans == [MathSpan("x_1", display=False), MathSpan("y^2", display=True), MathSpan("z", display=False)]


def test_extract_math_ignores_code_spans():
    source, spans = extract_math("Use `$HOME` then $$a$$")

    assert source == "Use `$HOME` then SOMAMATH0X"
    assert spans == [MathSpan("a", display=True)]


def test_render_fragment_keeps_latex_intact():
    html = MarkdownMathRenderer().render_fragment("Solve $a_1 * b_2 < c$ for **a**")

    assert "\\(a_1 * b_2 &lt; c\\)" in html
    assert "<strong>a</strong>" in html
    assert html.startswith("<p>")


def test_render_fragment_empty_input():
    assert MarkdownMathRenderer().render_fragment("   ") == "<p><em>No content provided.</em></p>"


def test_render_full_document_loads_mathjax():
    document = MarkdownMathRenderer().render_full_document("Hello", title="Q1", font_size=18)

    assert "mathjax" in document
    assert "font-size: 18pt" in document
    assert "<title>Q1</title>" in document
    assert "<p>Hello</p>" in document
