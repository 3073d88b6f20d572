"""Tests for the response segmenter."""

import pytest

from studyai.pipeline.segmenter import extract_text_content, has_special_content, segment_response
from studyai.schemas.segments import (
    CitationRef,
    CodeSegment,
    GraphSegment,
    MathSegment,
    TextSegment,
)


def kinds(parsed):
    return [type(s) for s in parsed.segments]


class TestPlainText:
    """Replies without markup."""

    @pytest.mark.parametrize(
        "text",
        [
            "Newton's second law relates force, mass and acceleration.",
            "Line one\nLine two\n\n  indented line",
            "Brackets without numbers [a] and [ 1 ] stay prose.",
        ],
    )
    def test_single_text_segment(self, text):
        """Text without markup comes back as exactly one Text segment."""
        parsed = segment_response(text)
        assert len(parsed.segments) == 1
        assert isinstance(parsed.segments[0], TextSegment)
        assert parsed.segments[0].content == text

    def test_empty_input(self):
        """Empty input gives a single empty Text segment."""
        parsed = segment_response("")
        assert len(parsed.segments) == 1
        assert parsed.segments[0].content == ""

    def test_currency_is_not_math(self):
        """Dollar amounts do not open inline math."""
        text = "The book costs $5 and the course $10 today."
        parsed = segment_response(text)
        assert kinds(parsed) == [TextSegment]

    def test_escaped_dollar(self):
        r"""An escaped \$ is literal."""
        text = r"Price: \$x$ is not math"
        parsed = segment_response(text)
        assert all(not isinstance(s, MathSegment) for s in parsed.segments)
        assert parsed.source_text() == text


class TestCodeBlocks:
    """Fenced code recognition."""

    def test_well_formed_block(self):
        """A fenced block becomes one Code segment with its language."""
        text = "Here:\n```python\nprint('hi')\n```\nDone"
        parsed = segment_response(text)

        assert kinds(parsed) == [TextSegment, CodeSegment, TextSegment]
        code = parsed.segments[1]
        assert code.language == "python"
        assert code.content == "print('hi')"
        assert code.executable is False
        assert parsed.segments[0].content == "Here:\n"
        assert parsed.segments[2].content == "\nDone"
        assert parsed.has_executable_code is False

    def test_executable_suffix(self):
        """The :executable suffix marks the block runnable."""
        text = "```python:executable\nx = [2]\nprint(x)\n```"
        parsed = segment_response(text)

        assert kinds(parsed) == [CodeSegment]
        code = parsed.segments[0]
        assert code.language == "python"
        assert code.executable is True
        assert parsed.has_executable_code is True

    def test_citation_inside_code_stays_code(self):
        """[2] inside a code block is code content, never a citation."""
        text = "See [1].\n```python\nvalues = data[2]\ncost = $5\n```\n"
        parsed = segment_response(text)

        citations = [s for s in parsed.segments if isinstance(s, CitationRef)]
        assert [c.id for c in citations] == [1]
        assert "data[2]" in parsed.primary_code.content
        assert "$5" in parsed.primary_code.content
        assert not any(isinstance(s, MathSegment) for s in parsed.segments)

    def test_unterminated_fence_runs_to_end(self):
        """An unclosed fence still yields a Code segment up to end of input."""
        text = "Try this:\n```js\nconsole.log([1]);\nlet a = 1;"
        parsed = segment_response(text)

        assert kinds(parsed) == [TextSegment, CodeSegment]
        code = parsed.segments[1]
        assert code.language == "js"
        assert code.content == "console.log([1]);\nlet a = 1;"
        assert parsed.source_text() == text

    def test_fence_without_newline_at_end(self):
        """A bare opening fence at the very end never errors."""
        parsed = segment_response("Code follows ```python")
        assert isinstance(parsed.segments[-1], CodeSegment)
        assert parsed.segments[-1].content == ""

    def test_fence_without_language(self):
        """A fence with no language tag is labelled text."""
        parsed = segment_response("```\nplain block\n```")
        assert parsed.primary_code.language == "text"
        assert parsed.primary_code.content == "plain block"

    def test_single_line_fence(self):
        """```code``` on one line is a code span."""
        parsed = segment_response("Run ```print(1)``` now")
        assert kinds(parsed) == [TextSegment, CodeSegment, TextSegment]
        assert parsed.primary_code.content == "print(1)"

    def test_language_case_preserved(self):
        parsed = segment_response("```Java\nclass A {}\n```")
        assert parsed.primary_code.language == "Java"

    def test_indentation_preserved(self):
        """Leading indentation of the first code line is kept."""
        parsed = segment_response("```python\n    return x\n```")
        assert parsed.primary_code.content == "    return x"


class TestGraphDetection:
    """Python plotting code is classified as a graph."""

    def test_matplotlib_block_keeps_code_and_adds_graph(self):
        text = (
            "Plot:\n```python:executable\n"
            "import matplotlib.pyplot as plt\n"
            "plt.plot([1, 2], [3, 4])\n"
            "plt.show()\n```"
        )
        parsed = segment_response(text)

        assert kinds(parsed) == [TextSegment, CodeSegment, GraphSegment]
        code, graph = parsed.segments[1], parsed.segments[2]
        assert code.executable is True
        assert graph.python_code == code.content
        assert graph.python_code.startswith("import matplotlib.pyplot as plt")
        assert parsed.primary_code is code
        assert parsed.primary_graph is graph
        assert parsed.has_executable_code is True
        assert parsed.has_graph is True
        assert parsed.source_text() == text

    def test_graph_block_without_executable_suffix(self):
        """Exactly one Code segment per fence, with the flag the fence gives."""
        parsed = segment_response("```python\nimport matplotlib.pyplot as plt\nplt.plot([1, 2])\n```")

        assert kinds(parsed) == [CodeSegment, GraphSegment]
        assert parsed.primary_code.executable is False
        assert parsed.has_executable_code is False

    def test_non_python_plot_call_is_code(self):
        """Only python-like languages are considered for graphs."""
        parsed = segment_response("```js\nplt.plot(x)\n```")
        assert kinds(parsed) == [CodeSegment]

    def test_python_without_plotting_is_code(self):
        parsed = segment_response("```python\nprint(sum(range(10)))\n```")
        assert kinds(parsed) == [CodeSegment]
        assert parsed.has_graph is False


class TestMath:
    """Block and inline math."""

    def test_block_math(self):
        text = "Energy: $$E = mc^2$$ done"
        parsed = segment_response(text)

        assert kinds(parsed) == [TextSegment, MathSegment, TextSegment]
        math = parsed.segments[1]
        assert math.latex == "E = mc^2"
        assert math.display is True

    def test_multiline_block_math(self):
        parsed = segment_response("$$\n\\int_0^1 x\\,dx = \\frac{1}{2}\n$$")
        assert parsed.primary_math.latex == "\\int_0^1 x\\,dx = \\frac{1}{2}"
        assert parsed.primary_math.display is True

    def test_inline_math(self):
        parsed = segment_response("By $F=ma$ we get it.")
        assert kinds(parsed) == [TextSegment, MathSegment, TextSegment]
        assert parsed.primary_math.latex == "F=ma"
        assert parsed.primary_math.display is False

    def test_inline_math_does_not_cross_lines(self):
        parsed = segment_response("$a\nb$")
        assert kinds(parsed) == [TextSegment]

    def test_unterminated_block_math_is_text(self):
        text = "Start $$x + y and nothing closes"
        parsed = segment_response(text)
        assert kinds(parsed) == [TextSegment]
        assert parsed.segments[0].content == text

    def test_block_math_cannot_swallow_code_fence(self):
        """A fence between $$ delimiters wins; the $$ stay literal."""
        text = "$$a ```python\nx = 1\n``` $$"
        parsed = segment_response(text)

        assert kinds(parsed) == [TextSegment, CodeSegment, TextSegment]
        assert parsed.segments[0].content == "$$a "
        assert parsed.segments[2].content == " $$"
        assert parsed.primary_math is None


class TestCitations:
    """Citation markers."""

    def test_citation_markers(self):
        parsed = segment_response("Force [1] and mass [12].")
        ids = [s.id for s in parsed.segments if isinstance(s, CitationRef)]
        assert ids == [1, 12]
        assert parsed.citation_ids() == [1, 12]

    def test_inline_code_hides_citation(self):
        """`arr[1]` in inline code is prose, not a citation."""
        parsed = segment_response("Index with `arr[1]` here")
        assert kinds(parsed) == [TextSegment]


class TestParsedResponse:
    """Aggregate properties of the parse."""

    def test_primary_segments_are_same_objects(self):
        text = (
            "$a$ then $$b$$\n"
            "```python\nfirst()\n```\n"
            "```python:executable\nsecond()\n```\n"
        )
        parsed = segment_response(text)

        codes = [s for s in parsed.segments if isinstance(s, CodeSegment)]
        maths = [s for s in parsed.segments if isinstance(s, MathSegment)]
        assert parsed.primary_code is codes[0]
        assert parsed.primary_math is maths[0]
        assert parsed.primary_math.display is False
        assert parsed.has_executable_code is True

    def test_text_runs_are_coalesced(self):
        """Rejected candidates do not split the surrounding text."""
        parsed = segment_response("a $ b [x] c ` d")
        assert kinds(parsed) == [TextSegment]

    def test_reconstructs_input(self):
        text = (
            "Intro [1] with $x^2$ and $$\\sum_i i$$ plus cost $5.\n"
            "```python:executable\nimport matplotlib.pyplot as plt\nplt.plot([1])\n```\n"
            "```c\nint a[3];\n```\nOutro [2] `code` and unterminated ```sh\nls -la"
        )
        parsed = segment_response(text)
        assert parsed.source_text() == text

    def test_has_special_content(self):
        assert has_special_content("plain words") is False
        assert has_special_content("see [3]") is True
        assert has_special_content("math $x$ here") is True

    def test_extract_text_content(self):
        parsed = segment_response("Law $F=ma$ [1]\n```python\nprint(1)\n```")
        assert extract_text_content(parsed.segments) == "Law $F=ma$ [1]\n```python\nprint(1)\n```"

    def test_serialises_with_type_tags(self):
        parsed = segment_response("$$x$$[1]")
        dumped = [s.model_dump(by_alias=True) for s in parsed.segments]
        assert dumped == [
            {"type": "math", "latex": "x", "display": True},
            {"type": "citation", "id": 1},
        ]
