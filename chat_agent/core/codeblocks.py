"""Extraction of fenced code blocks from model output."""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

FENCE = "```"

# An opening fence: optional indentation, the fence, then a tag glued to it.
_OPENING = re.compile(r"^[ \t]*```(?P<tag>[^\s`]*)(?P<rest>.*)$")


@dataclass(frozen=True)
class CodeBlock:
    language_tag: Optional[str]
    body: str


def _opening_tag(line: str) -> Optional[str]:
    """Return the tag of an opening fence line ("" if untagged), else None."""
    match = _OPENING.match(line.rstrip("\r\n"))
    if match is None or FENCE in match.group("rest"):
        return None
    return match.group("tag")


def _is_closing(line: str) -> bool:
    return line.strip() == FENCE


def iter_code_blocks(text: str) -> Iterator[CodeBlock]:
    """Yield the fenced code blocks of *text* in order of appearance.

    A block opens on a line starting with three backticks, optionally
    followed directly by a language tag, and ends at the next line holding
    nothing but three backticks. Blocks without a closing fence are dropped,
    and fences do not nest.
    """
    tag: Optional[str] = None
    body: List[str] = []
    inside = False

    for line in text.splitlines(keepends=True):
        if inside:
            if _is_closing(line):
                yield CodeBlock(language_tag=tag or None, body="".join(body))
                inside = False
                body = []
            else:
                body.append(line)
            continue

        opening = _opening_tag(line)
        if opening is not None:
            tag = opening
            inside = True


def extract_code_blocks(text: str) -> List[CodeBlock]:
    return list(iter_code_blocks(text))
