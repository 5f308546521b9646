"""Decode the inner markup of a single clue cell into plain text and media links.

Clue cells on the archive are mostly plain text, but clues that were
presented with a picture or a video carry a wrapper that reads on the page
like a parenthetical stage direction ("(Sarah of the Clue Crew ...)") while
the actual asset URL sits in the anchor's ``href``.  The wrapper starts with
``(<a`` and, in the markup this decoder targets, closes with ``">)``.  The
real clue prompt is whatever follows the closing marker.

Failure behaviour: decoding never raises.  A wrapper without a closing
marker degrades to the text that preceded the wrapper; a wrapper without a
recognisable media link simply leaves the corresponding reference unset.
"""

from __future__ import annotations

import re

import structlog
from bs4 import BeautifulSoup

from src.models.game import DecodedClueText

logger = structlog.get_logger(logger_name=__name__)

WRAPPER_START = "(<a"
WRAPPER_END = '">)'

VIDEO_EXTENSIONS: tuple[str, ...] = ("wmv", "mp4", "mov", "m4v", "webm", "mpg", "mpeg", "avi", "flv")
IMAGE_EXTENSIONS: tuple[str, ...] = ("jpg", "jpeg", "png", "gif", "bmp", "webp")

# &#233; and &#xE9; style references.
_NUMERIC_REF_RE = re.compile(r"&#(?:[xX]([0-9a-fA-F]+)|([0-9]+));")


def _media_pattern(extensions: tuple[str, ...]) -> re.Pattern[str]:
    # A quoted attribute value whose last path segment ends in one of the
    # extensions; an optional query string is allowed after it.
    joined = "|".join(extensions)
    return re.compile(
        rf"""["']([^"'<>]+?\.(?:{joined}))(?:\?[^"'<>]*)?["']""",
        re.IGNORECASE,
    )


_VIDEO_RE = _media_pattern(VIDEO_EXTENSIONS)
_IMAGE_RE = _media_pattern(IMAGE_EXTENSIONS)


def decode_numeric_references(text: str) -> str:
    """Replace ``&#NNN;`` / ``&#xHH;`` escapes with their characters.

    Named entities (``&amp;``) are left alone so that escaped markup is not
    turned into real tags before the plain-text render.  References that do
    not map to a valid code point are kept verbatim.
    """

    def _replace(match: re.Match[str]) -> str:
        hex_digits, dec_digits = match.group(1), match.group(2)
        try:
            code_point = int(hex_digits, 16) if hex_digits else int(dec_digits)
            return chr(code_point)
        except (ValueError, OverflowError):
            return match.group(0)

    return _NUMERIC_REF_RE.sub(_replace, text)


def find_media_reference(fragment: str, extensions: tuple[str, ...]) -> str | None:
    """Return the first quoted attribute value in *fragment* ending in *extensions*."""
    if extensions == VIDEO_EXTENSIONS:
        pattern = _VIDEO_RE
    elif extensions == IMAGE_EXTENSIONS:
        pattern = _IMAGE_RE
    else:
        pattern = _media_pattern(extensions)
    match = pattern.search(fragment)
    return match.group(1) if match else None


def render_plain_text(fragment: str) -> str:
    """Strip markup tags and resolve named entities; whitespace is kept as is."""
    if not fragment:
        return ""
    if "<" not in fragment and "&" not in fragment:
        return fragment
    return BeautifulSoup(fragment, "html.parser").get_text()


def decode_clue_text(raw: str | None) -> DecodedClueText:
    """Decode the raw inner markup of a clue-text cell.

    Parameters
    ----------
    raw:
        Inner HTML of ``td.clue_text``; ``None`` or ``""`` for an empty
        clue placeholder.

    Returns
    -------
    DecodedClueText
        Plain clue text plus ``image_ref`` / ``video_ref`` when the clue
        carried a concealed media link.  Text without a wrapper keeps its
        surrounding whitespace, so plain input comes back unchanged; text
        recovered from around a wrapper is trimmed.
    """
    if not raw:
        return DecodedClueText(text="")

    decoded = decode_numeric_references(raw)

    start = decoded.find(WRAPPER_START)
    if start == -1:
        return DecodedClueText(text=render_plain_text(decoded))

    wrapper = decoded[start:]
    video_ref = find_media_reference(wrapper, VIDEO_EXTENSIONS)
    image_ref = find_media_reference(wrapper, IMAGE_EXTENSIONS)

    end = wrapper.find(WRAPPER_END)
    if end == -1:
        logger.debug("clue_wrapper_unterminated", prefix_length=start)
        surviving = decoded[:start]
    else:
        surviving = wrapper[end + len(WRAPPER_END):]

    return DecodedClueText(
        text=render_plain_text(surviving).strip(),
        image_ref=image_ref,
        video_ref=video_ref,
    )
