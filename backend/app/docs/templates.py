"""Starter document bodies per format."""

from backend.app.models.documents import DocumentFormat

DEFAULT_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>My Document</title>
</head>
<body>
  <h1>Welcome to DocCraft AI</h1>
  <p>Start editing your document here. The AI assistant can help you write, improve, and format your content.</p>

  <h2>Features</h2>
  <ul>
    <li>Live preview</li>
    <li>AI-powered editing assistance</li>
    <li>Multiple format support (HTML, LaTeX, RTF)</li>
    <li>Export to various formats</li>
  </ul>

  <h2>Getting Started</h2>
  <p>Try asking the AI to help you:</p>
  <ol>
    <li>Add a new section</li>
    <li>Improve your writing</li>
    <li>Convert to a different format</li>
  </ol>
</body>
</html>"""

DEFAULT_LATEX = r"""\documentclass{article}
\usepackage{amsmath}
\usepackage{amssymb}

\title{My Document}
\author{DocCraft AI}
\date{\today}

\begin{document}

\maketitle

\section{Introduction}
Welcome to DocCraft AI. This is a LaTeX document with full math support.

\section{Mathematics}
Here's the quadratic formula:
$$x = \frac{-b \pm \sqrt{b^2 - 4ac}}{2a}$$

\section{Inline Math}
The area of a circle is $A = \pi r^2$.

\end{document}"""

DEFAULT_RTF = r"""{\rtf1\ansi\deff0
{\fonttbl{\f0\froman Times New Roman;}}

\f0\fs24

{\b Welcome to DocCraft AI}
\par
\par
This is a Rich Text Format document. RTF supports basic formatting like:
\par
\par
{\b Bold text}
\par
{\i Italic text}
\par
{\ul Underlined text}
\par
}"""

WELCOME_TITLE = "Welcome to DocCraft AI"

DEFAULT_TEMPLATES = {
    DocumentFormat.html: DEFAULT_HTML,
    DocumentFormat.latex: DEFAULT_LATEX,
    DocumentFormat.rtf: DEFAULT_RTF,
}

# Substring that marks content as already written in the format
_FORMAT_SIGNATURES = {
    DocumentFormat.html: "<",
    DocumentFormat.latex: "\\",
    DocumentFormat.rtf: "{\\rtf",
}


def default_template(format: DocumentFormat) -> str:
    """Starter body for a format."""
    return DEFAULT_TEMPLATES[DocumentFormat(format)]


def content_for_format_switch(content: str, new_format: DocumentFormat) -> str:
    """Content to show after switching to ``new_format``.

    Keeps the current content when it already looks like the new format,
    otherwise swaps in the format's starter template.
    """
    new_format = DocumentFormat(new_format)
    if _FORMAT_SIGNATURES[new_format] in content:
        return content
    return DEFAULT_TEMPLATES[new_format]
