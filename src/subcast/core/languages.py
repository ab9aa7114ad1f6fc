"""Language code normalization for translation providers.

Accepts a bare 2-letter code, a code with a region subtag, or one of a small
set of recognized language names. Everything else normalizes to "auto".
"""

from __future__ import annotations

import re

AUTO = "auto"

# fmt: off
LANGUAGE_NAMES: dict[str, str] = {
    "english": "en",     "hindi": "hi",       "spanish": "es",
    "french": "fr",      "german": "de",      "italian": "it",
    "portuguese": "pt",  "russian": "ru",     "arabic": "ar",
    "turkish": "tr",     "japanese": "ja",    "korean": "ko",
    "thai": "th",        "hebrew": "he",      "dutch": "nl",
    "polish": "pl",      "ukrainian": "uk",   "vietnamese": "vi",
    "indonesian": "id",  "bengali": "bn",
    "chinese": "zh-CN",
    "chinese_simplified": "zh-CN",
    "chinese_traditional": "zh-TW",
}
# fmt: on

_CODE_RE = re.compile(r"^[A-Za-z]{2}(-[A-Za-z]{2,4})?$")


def normalize_language(value: str | None) -> str:
    """Normalize user or provider input to a translation language code.

    >>> normalize_language("PT-br")
    'pt-BR'
    >>> normalize_language("Chinese (Simplified)")
    'zh-CN'
    """
    if not value:
        return AUTO
    text = str(value).strip()
    if not text or text.lower() == AUTO:
        return AUTO
    if _CODE_RE.match(text):
        base, _, region = text.partition("-")
        if region:
            return f"{base.lower()}-{region.upper()}"
        return base.lower()
    key = re.sub(r"\s+", "_", text.lower()).replace("(", "").replace(")", "")
    return LANGUAGE_NAMES.get(key, AUTO)


def base_language(code: str) -> str:
    """Strip the region subtag: "zh-CN" -> "zh"."""
    return code.split("-", 1)[0].lower()


def same_language(source: str, target: str) -> bool:
    """Case-insensitive equality, never true when either side is "auto"."""
    src = (source or AUTO).lower()
    tgt = (target or AUTO).lower()
    return src != AUTO and src == tgt
