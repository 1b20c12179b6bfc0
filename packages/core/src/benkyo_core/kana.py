"""Built-in kana tables.

The grids follow the gojūon layout: one row per consonant line, one column
per vowel, with empty strings for the cells the syllabary leaves blank.
"""

from __future__ import annotations

from benkyo_store.models import KanaRecord, Scope

COLUMN_HEADERS = ["あ段", "い段", "う段", "え段", "お段"]
ROW_HEADERS = ["あ行", "か行", "さ行", "た行", "な行", "は行", "ま行", "や行", "ら行", "わ行", "ん"]

ROMAJI = [
    ["a", "i", "u", "e", "o"],
    ["ka", "ki", "ku", "ke", "ko"],
    ["sa", "shi", "su", "se", "so"],
    ["ta", "chi", "tsu", "te", "to"],
    ["na", "ni", "nu", "ne", "no"],
    ["ha", "hi", "fu", "he", "ho"],
    ["ma", "mi", "mu", "me", "mo"],
    ["ya", "", "yu", "", "yo"],
    ["ra", "ri", "ru", "re", "ro"],
    ["wa", "", "", "", "wo"],
    ["n", "", "", "", ""],
]

HIRAGANA = [
    ["あ", "い", "う", "え", "お"],
    ["か", "き", "く", "け", "こ"],
    ["さ", "し", "す", "せ", "そ"],
    ["た", "ち", "つ", "て", "と"],
    ["な", "に", "ぬ", "ね", "の"],
    ["は", "ひ", "ふ", "へ", "ほ"],
    ["ま", "み", "む", "め", "も"],
    ["や", "", "ゆ", "", "よ"],
    ["ら", "り", "る", "れ", "ろ"],
    ["わ", "", "", "", "を"],
    ["ん", "", "", "", ""],
]

KATAKANA = [
    ["ア", "イ", "ウ", "エ", "オ"],
    ["カ", "キ", "ク", "ケ", "コ"],
    ["サ", "シ", "ス", "セ", "ソ"],
    ["タ", "チ", "ツ", "テ", "ト"],
    ["ナ", "ニ", "ヌ", "ネ", "ノ"],
    ["ハ", "ヒ", "フ", "ヘ", "ホ"],
    ["マ", "ミ", "ム", "メ", "モ"],
    ["ヤ", "", "ユ", "", "ヨ"],
    ["ラ", "リ", "ル", "レ", "ロ"],
    ["ワ", "", "", "", "ヲ"],
    ["ン", "", "", "", ""],
]

_MODE_SCOPES = {
    "hiragana": Scope.KANA_HIRAGANA,
    "katakana": Scope.KANA_KATAKANA,
    "both": Scope.KANA_BOTH,
}


def scope_for_mode(mode: str) -> Scope:
    try:
        return _MODE_SCOPES[mode]
    except KeyError:
        raise ValueError(f"Unknown kana mode: {mode!r}. Choose one of {', '.join(_MODE_SCOPES)}.") from None


def cell_label(mode: str, row: int, col: int) -> str:
    """The glyph shown in one grid cell for ``mode`` ("" for blank cells)."""
    hira = HIRAGANA[row][col]
    kata = KATAKANA[row][col]
    if mode == "hiragana":
        return hira
    if mode == "katakana":
        return kata
    return f"{hira} / {kata}" if hira else ""


def kana_pool(mode: str) -> list[KanaRecord]:
    """Every non-blank cell of the grid for ``mode``, in table order.

    Records get stable ids derived from their grid position so a glyph keeps
    the same identity across sessions.
    """
    scope_for_mode(mode)
    pool = []
    for row, romaji_row in enumerate(ROMAJI):
        for col, roma in enumerate(romaji_row):
            label = cell_label(mode, row, col)
            if not label:
                continue
            pool.append(KanaRecord(id=f"{mode}-{row}-{col}", kana=label, roma=roma))
    return pool
