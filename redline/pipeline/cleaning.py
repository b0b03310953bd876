"""Default text-cleaning collaborator for entity values.

Strips transcription artifacts before values land in table cells. The
aggregator accepts any ``Callable[[str], str]`` in its place.
"""

import re

# Audio events such as "(laughs)" or "[music]".
_AUDIO_EVENT = re.compile(r"[\(\[][^\)\]]*[\)\]]")

_FILLER = re.compile(r"\b(?:um+|uh+|erm+|hmm+)\b[,.]?", re.IGNORECASE)

_WHITESPACE_RUN = re.compile(r"\s+")

_WRAPPING_QUOTES = "\"'“”‘’"

_TRAILING_PUNCTUATION = ".,;:!?"


def clean_entity_text(text: str) -> str:
    """Remove audio-event tags, fillers, wrapping quotes and trailing punctuation."""
    if not text:
        return ""
    cleaned = _AUDIO_EVENT.sub(" ", text)
    cleaned = _FILLER.sub(" ", cleaned)
    cleaned = _WHITESPACE_RUN.sub(" ", cleaned).strip()
    cleaned = cleaned.strip(_WRAPPING_QUOTES).strip()
    return cleaned.rstrip(_TRAILING_PUNCTUATION).strip()
