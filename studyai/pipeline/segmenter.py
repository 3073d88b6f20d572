"""
Pipeline stage 4: Response segmentation.

Turns the raw model reply into an ordered stream of typed segments with a
single left-to-right scan.  At every position the recognisers are tried in
precedence order:

  1. fenced code     ```lang / ```lang:executable ... ```
  2. block math      $$ ... $$
  3. inline math     $ ... $   (single line)
  4. citation        [n]

A span claimed by a recogniser is never rescanned, so ``[2]`` inside a
code block stays code and a ``$`` inside code never opens math.  Whatever
no recogniser claims is emitted as coalesced Text.
A python block that calls a plotting library is followed by a Graph
segment carrying the same source and an empty raw span.

The scanner never raises.  Unterminated fences run to the end of the
input; unterminated math delimiters are plain text.  Joining the ``raw``
span of every segment always reproduces the input exactly.
"""

from __future__ import annotations

import re

from studyai.schemas.segments import (
    CitationRef,
    CodeSegment,
    GraphSegment,
    MathSegment,
    ParsedResponse,
    TextSegment,
)

FENCE = "```"
EXECUTABLE_SUFFIX = ":executable"
PYTHON_LANGUAGES = frozenset({"python", "py", "python3", "py3"})
# Heuristic: a python block that calls a charting library is a graph
PLOT_SIGNATURES = ("plt.", "matplotlib", "pyplot", "plotly")

_CANDIDATE = re.compile(r"[`$\[]")
_CITATION = re.compile(r"\[(\d+)\]")


def _parse_fence_header(header: str) -> tuple[str, bool]:
    info = header.strip()
    tag = info.split()[0] if info else ""
    executable = tag.lower().endswith(EXECUTABLE_SUFFIX)
    if executable:
        tag = tag[: -len(EXECUTABLE_SUFFIX)]
    return tag or "text", executable


def _is_graph_code(language: str, source: str) -> bool:
    return language.lower() in PYTHON_LANGUAGES and any(sig in source for sig in PLOT_SIGNATURES)


class _Scanner:
    """Cursor over one reply; ``run`` is called exactly once."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.text_start = 0  # start of the pending, not yet emitted, plain text
        self.result = ParsedResponse()

    def run(self) -> ParsedResponse:
        text = self.text
        while self.pos < len(text):
            candidate = _CANDIDATE.search(text, self.pos)
            if candidate is None:
                break
            start = candidate.start()
            end, segment = self._match_at(start)
            if segment is not None:
                self._flush_text(start)
                self._emit(segment)
                if isinstance(segment, CodeSegment) and _is_graph_code(segment.language, segment.content):
                    # Zero-width companion; the code span keeps the raw text
                    self._emit(GraphSegment(python_code=segment.content))
                self.text_start = end
            self.pos = end

        self._flush_text(len(text))
        if not self.result.segments:
            self._emit(TextSegment(content=text, raw=text))
        return self.result

    # ── Recognisers ────────────────────────────────────────────────
    # Each returns (end, segment); segment None means "literal text up to end".

    def _match_at(self, i: int):
        ch = self.text[i]
        if ch == "`":
            if self.text.startswith(FENCE, i):
                return self._code(i)
            return self._inline_code(i)
        if ch == "$":
            if i > 0 and self.text[i - 1] == "\\":
                return i + 1, None
            if self.text.startswith("$$", i):
                return self._block_math(i)
            return self._inline_math(i)
        return self._citation(i)

    def _code(self, i: int):
        text = self.text
        header_start = i + len(FENCE)
        newline = text.find("\n", header_start)
        header_end = len(text) if newline == -1 else newline
        header = text[header_start:header_end]

        # ```print(x)``` on a single line
        inline_close = header.find(FENCE)
        if inline_close != -1:
            end = header_start + inline_close + len(FENCE)
            return end, self._finish_code(i, end, header[:inline_close].strip(), "text", False)

        language, executable = _parse_fence_header(header)
        body_start = len(text) if newline == -1 else newline + 1
        close = text.find(FENCE, body_start)
        if close == -1:
            end, body = len(text), text[body_start:]
        else:
            end, body = close + len(FENCE), text[body_start:close]
        return end, self._finish_code(i, end, body.lstrip("\n").rstrip(), language, executable)

    def _finish_code(self, start: int, end: int, source: str, language: str, executable: bool):
        raw = self.text[start:end]
        return CodeSegment(content=source, language=language, executable=executable, raw=raw)

    def _inline_code(self, i: int):
        # `x[1]` is prose, but its contents must not become math or citations
        text = self.text
        close = text.find("`", i + 1)
        newline = text.find("\n", i + 1)
        if close == -1 or (newline != -1 and newline < close):
            return i + 1, None
        return close + 1, None

    def _block_math(self, i: int):
        text = self.text
        close = text.find("$$", i + 2)
        fence = text.find(FENCE, i + 2)
        if close == -1 or (fence != -1 and fence < close):
            return i + 2, None
        latex = text[i + 2:close].strip()
        if not latex:
            return i + 2, None
        end = close + 2
        return end, MathSegment(latex=latex, display=True, raw=text[i:end])

    def _inline_math(self, i: int):
        text = self.text
        first = i + 1
        if first >= len(text) or text[first].isspace() or text[first] == "$":
            return i + 1, None

        close = text.find("$", first)
        while close != -1 and text[close - 1] == "\\":
            close = text.find("$", close + 1)
        newline = text.find("\n", first)
        if close == -1 or (newline != -1 and newline < close) or text[close - 1].isspace():
            return i + 1, None

        end = close + 1
        return end, MathSegment(latex=text[first:close], display=False, raw=text[i:end])

    def _citation(self, i: int):
        match = _CITATION.match(self.text, i)
        if match is None:
            return i + 1, None
        return match.end(), CitationRef(id=int(match.group(1)), raw=match.group(0))

    # ── Output ─────────────────────────────────────────────────────

    def _flush_text(self, end: int) -> None:
        if end > self.text_start:
            chunk = self.text[self.text_start:end]
            self._emit(TextSegment(content=chunk, raw=chunk))
        self.text_start = end

    def _emit(self, segment) -> None:
        result = self.result
        result.segments.append(segment)
        if isinstance(segment, CodeSegment):
            result.has_executable_code = result.has_executable_code or segment.executable
            if result.primary_code is None:
                result.primary_code = segment
        elif isinstance(segment, MathSegment):
            if result.primary_math is None:
                result.primary_math = segment
        elif isinstance(segment, GraphSegment):
            if result.primary_graph is None:
                result.primary_graph = segment


def segment_response(text: str) -> ParsedResponse:
    """Split a raw model reply into typed segments."""
    return _Scanner(text or "").run()


def has_special_content(text: str) -> bool:
    """True when the reply contains any math, code, citation or graph markup."""
    return any(not isinstance(s, TextSegment) for s in segment_response(text).segments)


def extract_text_content(segments) -> str:
    """Render segments back to markdown for copy-to-clipboard."""
    out: list[str] = []
    for seg in segments:
        if isinstance(seg, TextSegment):
            out.append(seg.content)
        elif isinstance(seg, MathSegment):
            out.append(f"$${seg.latex}$$" if seg.display else f"${seg.latex}$")
        elif isinstance(seg, CodeSegment):
            out.append(f"```{seg.language}\n{seg.content}\n```")
        elif isinstance(seg, CitationRef):
            out.append(f"[{seg.id}]")
        elif isinstance(seg, GraphSegment):
            out.append("[Graph]")
    return "".join(out)
