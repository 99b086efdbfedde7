"""Markdown + LaTeX rendering for question prompts and options.

Architecture note:
    Tutors paste prompts from many sources: some use ``\\(..\\)`` or ``$..$``
    delimiters, some type bare ``\\frac{1}{2}``, some paste Unicode symbols
    such as ``x²`` or ``≤``. The renderer first normalises all of these into
    delimited LaTeX, then lifts every maths span out of the text before
    Markdown runs (CommonMark would otherwise eat backslashes and underscores
    inside formulas), renders the remaining text with markdown-it, and puts
    the formulas back for MathJax to typeset at display time. Code spans are
    left to Markdown and never scanned for maths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html
import re

from markdown_it import MarkdownIt

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)

_UNICODE_MATH: tuple[tuple[str, str], ...] = (
    ("±", "\\pm "),
    ("×", "\\times "),
    ("÷", "\\div "),
    ("≤", "\\leq "),
    ("≥", "\\geq "),
    ("≠", "\\neq "),
    ("√", "\\sqrt{}"),
    ("π", "\\pi "),
    ("θ", "\\theta "),
    ("α", "\\alpha "),
    ("β", "\\beta "),
    ("γ", "\\gamma "),
    ("δ", "\\delta "),
    ("λ", "\\lambda "),
    ("μ", "\\mu "),
    ("σ", "\\sigma "),
    ("ω", "\\omega "),
    ("∞", "\\infty "),
    ("∑", "\\sum "),
    ("∫", "\\int "),
    ("→", "\\rightarrow "),
)

_SUPERSCRIPTS = {
    "⁻": "-", "⁺": "+", "⁰": "0", "¹": "1", "²": "2", "³": "3",
    "⁴": "4", "⁵": "5", "⁶": "6", "⁷": "7", "⁸": "8", "⁹": "9",
    "ⁿ": "n", "ⁱ": "i",
}
_SUPERSCRIPT_RE = re.compile(f"[{''.join(_SUPERSCRIPTS)}]+")

_HAS_DELIMITER_RE = re.compile(r"\\\(|\\\)|\\\[|\\\]|\$")
_LATEX_COMMAND_RE = re.compile(
    r"\\(?:frac|sqrt|sum|prod|int|lim|log|ln|sin|cos|tan|sec|csc|cot|arcsin|arccos|arctan"
    r"|pm|times|div|leq|geq|neq|infty|rightarrow|alpha|beta|gamma|delta|theta|pi|lambda"
    r"|mu|sigma|omega)\b"
)
_BRACED_SCRIPT_RE = re.compile(r"[\^_]\{")
_PARAGRAPH_RE = re.compile(r"\n[ \t]*\n")
_ESCAPED_COMMAND_RE = re.compile(r"\\\\(?=[A-Za-z()\[\]])")

_CODE_RE = re.compile(r"(```[\s\S]*?```|`[^`]+`)")
_MATH_RE = re.compile(r"(\\\([\s\S]*?\\\)|\\\[[\s\S]*?\\\]|\$\$[\s\S]*?\$\$|\$[^$]*?\$)")
_PLACEHOLDER = "SOMAMATH{index}X"


@dataclass(slots=True, frozen=True)
class MathSpan:
    """A formula lifted out of prompt text."""

    latex: str
    display: bool

    def to_mathjax(self) -> str:
        if self.display:
            return f"\\[{self.latex}\\]"
        return f"\\({self.latex}\\)"


def combine_superscripts(text: str) -> str:
    """Turn runs of Unicode superscripts into one ``^{...}`` group (``x⁻²`` -> ``x^{-2}``)."""
    return _SUPERSCRIPT_RE.sub(
        lambda match: "^{" + "".join(_SUPERSCRIPTS[ch] for ch in match.group(0)) + "}",
        text,
    )


def auto_wrap_latex(text: str) -> str:
    """Wrap text containing bare LaTeX commands in inline maths delimiters."""
    if _HAS_DELIMITER_RE.search(text):
        return text
    if _LATEX_COMMAND_RE.search(text) or _BRACED_SCRIPT_RE.search(text):
        return f"\\({text}\\)"
    return text


def normalize_math_text(text: str) -> str:
    """Unicode maths to LaTeX, then auto-wrap bare commands. Applied per paragraph."""
    paragraphs = []
    for paragraph in _PARAGRAPH_RE.split(text):
        processed = combine_superscripts(paragraph)
        for symbol, replacement in _UNICODE_MATH:
            processed = processed.replace(symbol, replacement)
        paragraphs.append(auto_wrap_latex(processed))
    return "\n\n".join(paragraphs)


def unescape_latex(text: str) -> str:
    """Collapse doubled backslashes left behind by JSON-escaped uploads.

    Only a pair in front of a command name or delimiter is collapsed, so a
    LaTeX row break (``\\\\`` followed by whitespace) survives.
    """
    return _ESCAPED_COMMAND_RE.sub(r"\\", text)


def _parse_math(part: str) -> MathSpan | None:
    if part.startswith("\\(") and part.endswith("\\)"):
        return MathSpan(part[2:-2], display=False)
    if part.startswith("\\[") and part.endswith("\\]"):
        return MathSpan(part[2:-2], display=True)
    if part.startswith("$$") and part.endswith("$$") and len(part) >= 4:
        return MathSpan(part[2:-2], display=True)
    if part.startswith("$") and part.endswith("$") and len(part) > 1:
        return MathSpan(part[1:-1], display=False)
    return None


def extract_math(text: str) -> tuple[str, list[MathSpan]]:
    """Replace maths outside code with placeholders and return the spans."""
    spans: list[MathSpan] = []
    pieces: list[str] = []
    for segment in _CODE_RE.split(text):
        if _CODE_RE.fullmatch(segment):
            pieces.append(segment)
            continue
        for part in _MATH_RE.split(segment):
            span = _parse_math(part) if part else None
            if span is None:
                pieces.append(part)
                continue
            pieces.append(_PLACEHOLDER.format(index=len(spans)))
            spans.append(span)
    return "".join(pieces), spans


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        source, spans = extract_math(normalize_math_text(unescape_latex(sanitized)))
        rendered = self._markdown.render(source)
        for index, span in enumerate(spans):
            rendered = rendered.replace(
                _PLACEHOLDER.format(index=index),
                html.escape(span.to_mathjax(), quote=False),
                1,
            )
        return rendered

    def wrap_with_mathjax(self, body_html: str, title: str = "SOMA", font_size: int = 14) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{html.escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; }}
      .question-html {{ font-size: {font_size}pt; line-height: 1.5; }}
      .question-html img {{ max-width: 100%; border-radius: 6px; }}
      .question-html pre {{ background: #1e293b; color: #6ee7b7; padding: 0.75rem 1rem; border-radius: 6px; white-space: pre-wrap; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['\\\\(','\\\\)'], ['$','$']], displayMath: [['\\\\[','\\\\]'], ['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""

    def render_full_document(self, markdown_text: str, title: str = "SOMA", font_size: int = 14) -> str:
        """Convenience wrapper to render markdown and embed MathJax."""

        fragment = self.render_fragment(markdown_text)
        return self.wrap_with_mathjax(fragment, title=title, font_size=font_size)


renderer = MarkdownMathRenderer()
# Shared instance; MarkdownIt is safe for read-only renders from the Qt thread.
