"""Standard Torznab category tree.

Parent categories are multiples of 1000; subcategories share their
parent's thousands "family" (e.g. 2040 Movies/HD belongs to 2000 Movies).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class TorznabCategory:
    id: int
    name: str
    parent_id: int | None = None

    @property
    def is_parent(self) -> bool:
        return self.parent_id is None


class Cats:
    """Named Torznab category codes."""

    CONSOLE = 1000
    CONSOLE_NDS = 1010
    CONSOLE_PSP = 1020
    CONSOLE_WII = 1030
    CONSOLE_XBOX = 1040
    CONSOLE_XBOX360 = 1050
    CONSOLE_WIIWARE = 1060
    CONSOLE_XBOX360_DLC = 1070
    CONSOLE_PS3 = 1080
    CONSOLE_OTHER = 1090
    CONSOLE_3DS = 1110
    CONSOLE_PSVITA = 1120
    CONSOLE_WIIU = 1130
    CONSOLE_XBOX_ONE = 1140
    CONSOLE_PS4 = 1150
    CONSOLE_SWITCH = 1180

    MOVIES = 2000
    MOVIES_FOREIGN = 2010
    MOVIES_OTHER = 2020
    MOVIES_SD = 2030
    MOVIES_HD = 2040
    MOVIES_UHD = 2045
    MOVIES_BLURAY = 2050
    MOVIES_3D = 2060
    MOVIES_DVD = 2070
    MOVIES_WEBDL = 2080

    AUDIO = 3000
    AUDIO_MP3 = 3010
    AUDIO_VIDEO = 3020
    AUDIO_AUDIOBOOK = 3030
    AUDIO_LOSSLESS = 3040
    AUDIO_OTHER = 3050
    AUDIO_FOREIGN = 3060

    PC = 4000
    PC_0DAY = 4010
    PC_ISO = 4020
    PC_MAC = 4030
    PC_MOBILE_OTHER = 4040
    PC_GAMES = 4050
    PC_MOBILE_IOS = 4060
    PC_MOBILE_ANDROID = 4070

    TV = 5000
    TV_WEBDL = 5010
    TV_FOREIGN = 5020
    TV_SD = 5030
    TV_HD = 5040
    TV_UHD = 5045
    TV_OTHER = 5050
    TV_SPORT = 5060
    TV_ANIME = 5070
    TV_DOCUMENTARY = 5080

    XXX = 6000
    XXX_DVD = 6010
    XXX_WMV = 6020
    XXX_XVID = 6030
    XXX_X264 = 6040
    XXX_PACK = 6050
    XXX_IMAGESET = 6060
    XXX_OTHER = 6070
    XXX_SD = 6080
    XXX_WEBDL = 6090

    BOOKS = 7000
    BOOKS_MAGS = 7010
    BOOKS_EBOOK = 7020
    BOOKS_COMICS = 7030
    BOOKS_TECHNICAL = 7040
    BOOKS_OTHER = 7050
    BOOKS_FOREIGN = 7060

    OTHER = 8000
    OTHER_MISC = 8010
    OTHER_HASHED = 8020


def _family(parent: int, name: str, subs: dict[int, str]) -> list[TorznabCategory]:
    out = [TorznabCategory(parent, name)]
    out.extend(
        TorznabCategory(cat_id, f"{name}/{sub}", parent) for cat_id, sub in subs.items()
    )
    return out


TORZNAB_CATEGORIES: tuple[TorznabCategory, ...] = tuple(
    [
        *_family(
            Cats.CONSOLE,
            "Console",
            {
                1010: "NDS",
                1020: "PSP",
                1030: "Wii",
                1040: "Xbox",
                1050: "Xbox 360",
                1060: "WiiWare",
                1070: "Xbox 360 DLC",
                1080: "PS3",
                1090: "Other",
                1110: "3DS",
                1120: "PS Vita",
                1130: "WiiU",
                1140: "Xbox One",
                1150: "PS4",
                1180: "Switch",
            },
        ),
        *_family(
            Cats.MOVIES,
            "Movies",
            {
                2010: "Foreign",
                2020: "Other",
                2030: "SD",
                2040: "HD",
                2045: "UHD",
                2050: "BluRay",
                2060: "3D",
                2070: "DVD",
                2080: "WEB-DL",
            },
        ),
        *_family(
            Cats.AUDIO,
            "Audio",
            {
                3010: "MP3",
                3020: "Video",
                3030: "Audiobook",
                3040: "Lossless",
                3050: "Other",
                3060: "Foreign",
            },
        ),
        *_family(
            Cats.PC,
            "PC",
            {
                4010: "0day",
                4020: "ISO",
                4030: "Mac",
                4040: "Mobile-Other",
                4050: "Games",
                4060: "Mobile-iOS",
                4070: "Mobile-Android",
            },
        ),
        *_family(
            Cats.TV,
            "TV",
            {
                5010: "WEB-DL",
                5020: "Foreign",
                5030: "SD",
                5040: "HD",
                5045: "UHD",
                5050: "Other",
                5060: "Sport",
                5070: "Anime",
                5080: "Documentary",
            },
        ),
        *_family(
            Cats.XXX,
            "XXX",
            {
                6010: "DVD",
                6020: "WMV",
                6030: "XviD",
                6040: "x264",
                6050: "Pack",
                6060: "ImageSet",
                6070: "Other",
                6080: "SD",
                6090: "WEB-DL",
            },
        ),
        *_family(
            Cats.BOOKS,
            "Books",
            {
                7010: "Mags",
                7020: "EBook",
                7030: "Comics",
                7040: "Technical",
                7050: "Other",
                7060: "Foreign",
            },
        ),
        *_family(Cats.OTHER, "Other", {8010: "Misc", 8020: "Hashed"}),
    ]
)

_BY_ID: dict[int, TorznabCategory] = {c.id: c for c in TORZNAB_CATEGORIES}


def get_category(cat_id: int) -> TorznabCategory | None:
    return _BY_ID.get(cat_id)


def category_name(cat_id: int) -> str | None:
    cat = _BY_ID.get(cat_id)
    return cat.name if cat else None


def get_subcategories(parent_id: int) -> list[TorznabCategory]:
    return [c for c in TORZNAB_CATEGORIES if c.parent_id == parent_id]


def get_parent_category(cat_id: int) -> TorznabCategory | None:
    """Return the parent of a subcategory (None for parents/unknown ids)."""
    cat = _BY_ID.get(cat_id)
    if cat is None or cat.parent_id is None:
        return None
    return _BY_ID.get(cat.parent_id)


def category_family(cat_id: int) -> int:
    """Thousands family of a category code (2040 -> 2)."""
    return cat_id // 1000


def expand_categories(cat_ids: Iterable[int]) -> list[int]:
    """Expand parent categories to include all of their subcategories.

    The result is sorted and free of duplicates.
    """
    expanded: set[int] = set()
    for cat_id in cat_ids:
        expanded.add(cat_id)
        cat = _BY_ID.get(cat_id)
        if cat is not None and cat.is_parent:
            expanded.update(sub.id for sub in get_subcategories(cat_id))
    return sorted(expanded)
