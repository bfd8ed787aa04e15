"""Map definition category strings ("Movies/HD") onto Torznab codes."""

from __future__ import annotations

from trawlarr.domain.entities import Cats

UNKNOWN_CATEGORY = Cats.OTHER

_CATEGORY_STRINGS: dict[str, int] = {
    "movies": Cats.MOVIES,
    "movies/hd": Cats.MOVIES_HD,
    "movies/sd": Cats.MOVIES_SD,
    "movies/uhd": Cats.MOVIES_UHD,
    "movies/4k": Cats.MOVIES_UHD,
    "movies/bluray": Cats.MOVIES_BLURAY,
    "movies/dvd": Cats.MOVIES_DVD,
    "movies/web-dl": Cats.MOVIES_WEBDL,
    "movies/3d": Cats.MOVIES_3D,
    "movies/foreign": Cats.MOVIES_FOREIGN,
    "movies/other": Cats.MOVIES_OTHER,
    "tv": Cats.TV,
    "tv/hd": Cats.TV_HD,
    "tv/sd": Cats.TV_SD,
    "tv/uhd": Cats.TV_UHD,
    "tv/4k": Cats.TV_UHD,
    "tv/web-dl": Cats.TV_WEBDL,
    "tv/foreign": Cats.TV_FOREIGN,
    "tv/anime": Cats.TV_ANIME,
    "tv/documentary": Cats.TV_DOCUMENTARY,
    "tv/documentaries": Cats.TV_DOCUMENTARY,
    "tv/sport": Cats.TV_SPORT,
    "tv/sports": Cats.TV_SPORT,
    "sports": Cats.TV_SPORT,
    "tv/other": Cats.TV_OTHER,
    "audio": Cats.AUDIO,
    "music": Cats.AUDIO,
    "audio/mp3": Cats.AUDIO_MP3,
    "audio/lossless": Cats.AUDIO_LOSSLESS,
    "audio/flac": Cats.AUDIO_LOSSLESS,
    "audio/audiobook": Cats.AUDIO_AUDIOBOOK,
    "audiobook": Cats.AUDIO_AUDIOBOOK,
    "audiobooks": Cats.AUDIO_AUDIOBOOK,
    "audio/video": Cats.AUDIO_VIDEO,
    "books": Cats.BOOKS,
    "books/ebook": Cats.BOOKS_EBOOK,
    "ebooks": Cats.BOOKS_EBOOK,
    "books/comics": Cats.BOOKS_COMICS,
    "comics": Cats.BOOKS_COMICS,
    "books/mags": Cats.BOOKS_MAGS,
    "magazines": Cats.BOOKS_MAGS,
    "pc": Cats.PC,
    "apps": Cats.PC,
    "applications": Cats.PC,
    "pc/games": Cats.PC_GAMES,
    "pc/0day": Cats.PC_0DAY,
    "pc/mac": Cats.PC_MAC,
    "console": Cats.CONSOLE,
    "games": Cats.CONSOLE,
}


def parse_category_string(value: str) -> int:
    """Case-insensitive lookup; unknown strings map to Other (8000)."""
    return _CATEGORY_STRINGS.get(value.strip().lower(), UNKNOWN_CATEGORY)
