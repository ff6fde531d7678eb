from __future__ import annotations

import unicodedata

# Latin letters that Unicode decomposition leaves alone (strokes, ligatures,
# hooks). Keys are lowercased before this runs, so only lowercase forms.
LATIN_BASE_LETTERS = {
    "æ": "ae", "ǽ": "ae", "ǣ": "ae",
    "œ": "oe",
    "ø": "o", "ǿ": "o", "ɔ": "o", "ɵ": "o",
    "ꜳ": "aa", "ꜵ": "ao", "ꜷ": "au", "ꜹ": "av", "ꜻ": "av", "ꜽ": "ay",
    "ꝏ": "oo", "ƣ": "oi", "ȣ": "ou",
    "ƀ": "b", "ƃ": "b", "ɓ": "b",
    "ƈ": "c", "ȼ": "c", "ꜿ": "c", "ↄ": "c",
    "đ": "d", "ƌ": "d", "ɖ": "d", "ɗ": "d", "ꝺ": "d",
    "ɇ": "e", "ɛ": "e", "ǝ": "e",
    "ƒ": "f", "ꝼ": "f",
    "ǥ": "g", "ɠ": "g", "ꞡ": "g", "ᵹ": "g", "ꝿ": "g",
    "ħ": "h", "ⱨ": "h", "ⱶ": "h", "ɥ": "h", "ƕ": "hv",
    "ı": "i", "ɨ": "i",
    "ɉ": "j",
    "ƙ": "k", "ⱪ": "k", "ꝁ": "k", "ꝃ": "k", "ꝅ": "k", "ꞣ": "k",
    "ŀ": "l", "ł": "l", "ƚ": "l", "ɫ": "l", "ⱡ": "l", "ꝉ": "l", "ꞁ": "l", "ꝇ": "l",
    "ɱ": "m", "ɯ": "m",
    "ƞ": "n", "ɲ": "n", "ŉ": "n", "ꞑ": "n", "ꞥ": "n",
    "ƥ": "p", "ᵽ": "p", "ꝑ": "p", "ꝓ": "p", "ꝕ": "p",
    "ɋ": "q", "ꝗ": "q", "ꝙ": "q",
    "ɍ": "r", "ɽ": "r", "ꝛ": "r", "ꞧ": "r", "ꞃ": "r",
    "ß": "s", "ȿ": "s", "ꞩ": "s", "ꞅ": "s", "ẛ": "s",
    "ŧ": "t", "ƭ": "t", "ʈ": "t", "ⱦ": "t", "ꞇ": "t", "ꜩ": "tz",
    "ʉ": "u",
    "ʋ": "v", "ꝟ": "v", "ʌ": "v", "ꝡ": "vy",
    "ⱳ": "w",
    "ƴ": "y", "ɏ": "y", "ỿ": "y",
    "ƶ": "z", "ȥ": "z", "ɀ": "z", "ⱬ": "z", "ꝣ": "z",
}

_TABLE = str.maketrans(LATIN_BASE_LETTERS)


def strip_diacritics(text: str) -> str:
    """
    Map accented and composed Latin letters to plain ASCII letters.

    "Ångström" -> "Angstrom", "straße" -> "strase", "Ⓐ" -> "A".
    Characters with no Latin base are returned unchanged.
    """
    text = (text or "").translate(_TABLE)
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
