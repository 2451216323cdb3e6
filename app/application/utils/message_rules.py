from __future__ import annotations

import re

CANCEL_KEYWORDS = (
    "cancel",
    "stop",
    "quit",
    "never mind",
    "nevermind",
    "start over",
    "mistake",
)

BOOKING_KEYWORDS = (
    "book",
    "reserve",
    "reservation",
    "table",
)

CONFIRM_KEYWORDS = (
    "yes",
    "confirm",
)

ABANDON_KEYWORDS = ("mistake",)

# Checked in order, first match wins
FIELD_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("special_requests", ("special", "request")),
    ("email", ("email", "e-mail", "mail")),
    ("party_size", ("party", "people", "size", "guests", "persons")),
    ("phone", ("phone", "number")),
    ("name", ("name",)),
    ("date", ("date", "day")),
    ("time", ("time", "hour")),
)

NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
}

_NAME_INTRO = re.compile(
    r"\b(?:my name is|my name's|name is|i'm|i am|im|this is|call me)\s+"
    r"([a-z][a-z'\-]*(?:\s+[a-z][a-z'\-]*){0,3})",
    re.IGNORECASE,
)
_BOOKING_WORDS = ("book", "booking", "reserve", "reservation", "table")
_NAME_STOP_WORDS = {"and", "my", "email", "i", "for", "at", "on", "with", "here", "please", "looking", "trying", "calling", "wondering"}
_EMAIL = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_INTEGER = re.compile(r"(?<![\d/:.])\b(\d+)\b(?![/:]|\.\d)")
_NUMBER_WORD = re.compile(r"\b(" + "|".join(NUMBER_WORDS) + r")\b")


def normalize_text(text: str) -> str:
    normalized = text.lower()
    normalized = re.sub(r"\s+", " ", normalized).strip()
    return normalized


def contains_keyword(text: str, keywords: tuple[str, ...]) -> bool:
    """Case-insensitive match of any keyword at a word start ("book" hits "booking", not "ebook")."""
    normalized = normalize_text(text)
    return any(re.search(rf"\b{re.escape(keyword)}", normalized) for keyword in keywords)


def contains_word(text: str, words: tuple[str, ...]) -> bool:
    """Whole-word match ("yes" hits "yes please", not "yesterday" or "Yesenia")."""
    normalized = normalize_text(text)
    return any(re.search(rf"\b{re.escape(word)}\b", normalized) for word in words)


def is_booking_request(text: str) -> bool:
    return contains_keyword(text, BOOKING_KEYWORDS)


def is_cancel_request(text: str) -> bool:
    return contains_keyword(text, CANCEL_KEYWORDS)


def is_confirmation(text: str) -> bool:
    return contains_word(text, CONFIRM_KEYWORDS)


def is_abandon_request(text: str) -> bool:
    return contains_keyword(text, ABANDON_KEYWORDS)


def extract_name(text: str) -> str | None:
    """
    Pull a guest name from "my name is ..." style phrases.
    Without such a phrase the whole utterance is taken as the name, unless it
    reads like a booking request or obviously is not a name.
    """
    stripped = text.strip().strip(".!?,")
    if not stripped:
        return None

    match = _NAME_INTRO.search(stripped)
    if match:
        words: list[str] = []
        for word in match.group(1).split():
            if word.lower() in _NAME_STOP_WORDS:
                break
            words.append(word)
        candidate = " ".join(words)
        if candidate and not contains_word(candidate, _BOOKING_WORDS):
            return _titleize(candidate)

    if is_booking_request(stripped):
        return None
    if not re.search(r"[A-Za-z]", stripped) or re.search(r"[\d@]", stripped):
        return None
    return _titleize(re.sub(r"\s+", " ", stripped))


def _titleize(name: str) -> str:
    if name.islower() or name.isupper():
        return " ".join(part.capitalize() for part in name.split())
    return name


def extract_email(text: str) -> str | None:
    match = _EMAIL.search(text)
    if not match:
        return None
    return match.group(0).rstrip(".").lower()


def extract_phone(text: str) -> str | None:
    candidate = re.search(r"\+?\d[\d\s().\-]{5,}\d", text)
    if not candidate:
        return None
    digits = re.sub(r"\D", "", candidate.group(0))
    if not 7 <= len(digits) <= 15:
        return None
    return ("+" if candidate.group(0).strip().startswith("+") else "") + digits


def first_number(text: str) -> int | None:
    """First standalone integer in the text, digits or a number word."""
    normalized = normalize_text(text)
    digit_match = _INTEGER.search(normalized)
    word_match = _NUMBER_WORD.search(normalized)
    if digit_match and (not word_match or digit_match.start() < word_match.start()):
        return int(digit_match.group(1))
    if word_match:
        return NUMBER_WORDS[word_match.group(1)]
    return None


def extract_party_size(text: str, max_size: int = 8) -> int | None:
    size = first_number(text)
    if size is None or not 1 <= size <= max_size:
        return None
    return size


def mentions_number(text: str) -> bool:
    return first_number(text) is not None


def extract_special_requests(text: str) -> str | None:
    stripped = text.strip()
    if not stripped:
        return None
    if stripped.rstrip(".!").strip().lower() == "none":
        return ""
    return stripped


def find_field_keyword(text: str) -> str | None:
    """Field the guest wants to change at the confirmation step, if named."""
    for field_name, keywords in FIELD_KEYWORDS:
        if contains_keyword(text, keywords):
            return field_name
    return None
