"""Kangxi radicals and their stroke counts."""

from typing import Dict


RADICAL_STROKES: Dict[str, int] = {}

_RADICALS_BY_STROKES = {
    1: "一丨丶丿乙亅",
    2: "二亠人儿入八冂冖冫几凵刀力勹匕匸匚十卜卩厂厶又",
    3: "口囗土士夂夕大女子宀寸小尢尸屮山巛工己巾干幺广廴廾弋弓彐彡彳夊",
    4: "心戈戶手支攴文斗斤方无日曰月木欠止歹殳毋比毛氏气水火爪父爻爿片牙牛犬",
    5: "玄玉瓜瓦甘生用田疋疒癶白皮皿目矛矢石示禸禾穴立",
    6: "竹米糸缶网羊羽老而耒耳聿肉臣自至臼舌舛舟艮色艸虍虫血行衣襾",
    7: "見角言谷豆豕豸貝赤走足身車辛辰辵邑酉釆里",
    8: "金長門阜隶隹雨青非",
    9: "面革韋韭音頁風飛食首香",
    10: "馬骨高髟鬥鬯鬲鬼",
    11: "魚鳥鹵鹿麥麻",
    12: "黃黍黑黹",
    13: "黽鼎鼓鼠",
    14: "鼻齊",
    15: "齒",
    16: "龍龜",
    17: "龠",
}

for _strokes, _radicals in _RADICALS_BY_STROKES.items():
    for _radical in _radicals:
        RADICAL_STROKES[_radical] = _strokes


# Map common radical variants to their primary standalone characters
RADICAL_VARIANT_TO_PRIMARY: Dict[str, str] = {
    "氵": "水",
    "扌": "手",
    "忄": "心",
    "艹": "艸",
    "阝": "阜",
    "亻": "人",
    "刂": "刀",
    "犭": "犬",
    "礻": "示",
    "衤": "衣",
    "糹": "糸",
    "飠": "食",
    "訁": "言",
    "户": "戶",
}


def _map_radical_variant_to_primary(ch: str) -> str:
    """Map radical variant to primary character."""
    return RADICAL_VARIANT_TO_PRIMARY.get(ch, ch)


def radical_stroke_count(radical: str) -> int:
    """Stroke count of a radical; 0 when the radical is not in the table."""
    return RADICAL_STROKES.get(_map_radical_variant_to_primary(radical), 0)
