"""WebVTT cleanup for caption files assembled from playlist segments."""

import re
from typing import List

SIGNATURE = "WEBVTT"
SYNC_HEADER = "X-TIMESTAMP-MAP"
CUE_SEPARATOR = "\n\n"
HEADER = SIGNATURE + CUE_SEPARATOR

# Any run of CRs before LF, so the result holds no CRLF.
_CRLF = re.compile(r'\r+\n')
_EXCESS_NEWLINES = re.compile(r'\n{3,}')


def normalize_line_endings(text: str) -> str:
    """Convert CRLF line breaks (used inside cue text) to LF."""
    return _CRLF.sub("\n", text)


def dedupe_signatures(text: str) -> str:
    """
    Keep a single file signature at the top.

    Every segment starts with its own "WEBVTT" line; all of them are removed
    and one signature followed by a blank line is prepended.
    """
    lines = [line for line in text.split("\n") if SIGNATURE not in line]
    return HEADER + "\n".join(lines)


def remove_sync_headers(text: str) -> str:
    """
    Drop X-TIMESTAMP-MAP headers, which a single file does not need.

    A leading signature keeps its blank line even when nothing follows it.
    """
    header = HEADER if text.startswith(HEADER) else ""
    lines = [line for line in text[len(header):].split("\n") if SYNC_HEADER not in line]
    return _EXCESS_NEWLINES.sub(CUE_SEPARATOR, header + "\n".join(lines))


def collapse_repeated_cues(text: str) -> str:
    """
    Collapse runs of identical adjacent cue blocks into one block.

    Segments overlap, so a cue spanning a boundary appears in both. Equal
    blocks separated by a different block are left alone.
    """
    blocks = text.split(CUE_SEPARATOR)
    kept: List[str] = []
    for index, block in enumerate(blocks):
        if index > 0 and block == blocks[index - 1]:
            continue
        kept.append(block)
    return CUE_SEPARATOR.join(kept)


def normalize(text: str) -> str:
    """Run all cleanup stages in order."""
    text = normalize_line_endings(text)
    text = dedupe_signatures(text)
    text = remove_sync_headers(text)
    return collapse_repeated_cues(text)
