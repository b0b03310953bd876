"""Shared fixtures for Redline tests."""

import pytest


def _words_from_tokens(tokens, start=0.0, step=0.5):
    """Build a word stream with spacing items between tokens."""
    words = []
    time = start
    for index, token in enumerate(tokens):
        if index:
            words.append({"text": " ", "start": time, "end": time, "type": "spacing"})
        words.append({"text": token, "start": time, "end": time + step, "type": "word"})
        time += step
    return words


@pytest.fixture
def make_words():
    """Factory for word streams: make_words(["Hello", "world"], start=1.0)."""
    return _words_from_tokens


@pytest.fixture
def card_payload():
    """Transcript mentioning a card number, in the collaborator's camelCase form."""
    text = "My card is 4111 1111 1111 1111."
    return {
        "text": text,
        "languageCode": "eng",
        "languageProbability": 0.98,
        "words": _words_from_tokens(
            ["My", "card", "is", "4111", "1111", "1111", "1111."], start=0.0, step=0.5
        ),
        "entities": [
            {
                "entityType": "credit_card",
                "text": "4111 1111 1111 1111",
                "startChar": 11,
                "endChar": 31,
            }
        ],
    }


@pytest.fixture
def call_payload():
    """Longer support-call transcript with a leading ellipsis only in the word stream."""
    text = (
        "Hi, this is Randall Thomas calling. My phone is 555 123 4567 "
        "and my email is randall@example.com. Randall again."
    )
    tokens = ["...Hi,"] + text.split(" ")[1:]
    return {
        "text": text,
        "words": _words_from_tokens(tokens, start=10.0, step=1.0),
        "entities": [
            {"entity_type": "person_name", "text": "Randall Thomas", "start_char": 12, "end_char": 26},
            {"entity_type": "phone_number", "text": "555 123 4567", "start_char": 48, "end_char": 60},
            {"entity_type": "email_address", "text": "randall@example.com", "start_char": 77, "end_char": 96},
            {"entity_type": "person_name", "text": "Randall", "start_char": 98, "end_char": 105},
        ],
    }
