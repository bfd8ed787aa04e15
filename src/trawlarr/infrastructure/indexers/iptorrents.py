"""IPTorrents backend (private tracker, cookie session, HTML scraping)."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from urllib.parse import urlencode

from bs4 import Tag

from trawlarr.domain.entities import (
    Cats,
    MovieSearchParam,
    ReleaseInfo,
    TorznabCapabilities,
    TorznabQuery,
    TrackerType,
    TvSearchParam,
)
from trawlarr.domain.indexers import IndexerAuthError, IndexerRequestError
from trawlarr.domain.indexers.catalog import IPTORRENTS
from trawlarr.infrastructure.common.html_selectors import (
    href_of,
    parse_html,
    select_first,
    select_items,
)
from trawlarr.infrastructure.indexers.httpx_base import HttpxIndexerBase
from trawlarr.infrastructure.indexers.parsers import (
    clean_title,
    parse_int,
    parse_size,
    parse_time_ago,
)

DEFAULT_SITE_LINK = "https://iptorrents.com/"

ALTERNATIVE_LINKS = (
    "https://iptorrents.com/",
    "https://www.iptorrents.com/",
    "https://iptorrents.me/",
    "https://nemo.iptorrents.com/",
    "https://ip.findnemo.net/",
    "https://ip.venom.global/",
    "https://ip.getcrazy.me/",
    "https://ip.workisboring.net/",
    "https://ipt.cool/",
    "https://ipt.lol/",
    "https://ipt.world/",
)

LOGGED_IN_MARKER = "/lout.php"
NO_RESULTS_MARKER = "No Torrents Found!"

MINIMUM_RATIO = 1.0
MINIMUM_SEED_TIME = 14 * 24 * 3600

_TABLE_SELECTORS = (
    "table#torrents",
    "table.t1",
    "table[class*='torrent']",
    "#content table",
    "table",
)

CATEGORY_MAPPINGS: tuple[tuple[str, int, str], ...] = (
    ("72", Cats.MOVIES, "Movies"),
    ("87", Cats.MOVIES_3D, "Movie/3D"),
    ("77", Cats.MOVIES_SD, "Movie/480p"),
    ("101", Cats.MOVIES_UHD, "Movie/4K"),
    ("89", Cats.MOVIES_BLURAY, "Movie/BD-R"),
    ("90", Cats.MOVIES_HD, "Movie/BD-Rip"),
    ("96", Cats.MOVIES_SD, "Movie/Cam"),
    ("6", Cats.MOVIES_DVD, "Movie/DVD-R"),
    ("48", Cats.MOVIES_HD, "Movie/HD/Bluray"),
    ("54", Cats.MOVIES, "Movie/Kids"),
    ("62", Cats.MOVIES_SD, "Movie/MP4"),
    ("38", Cats.MOVIES_FOREIGN, "Movie/Non-English"),
    ("68", Cats.MOVIES, "Movie/Packs"),
    ("20", Cats.MOVIES_WEBDL, "Movie/Web-DL"),
    ("100", Cats.MOVIES_HD, "Movie/x265"),
    ("7", Cats.MOVIES_SD, "Movie/Xvid"),
    ("73", Cats.TV, "TV"),
    ("26", Cats.TV_DOCUMENTARY, "TV/Documentaries"),
    ("55", Cats.TV_SPORT, "Sports"),
    ("78", Cats.TV_SD, "TV/480p"),
    ("23", Cats.TV_HD, "TV/BD"),
    ("24", Cats.TV_SD, "TV/DVD-R"),
    ("25", Cats.TV_SD, "TV/DVD-Rip"),
    ("66", Cats.TV_SD, "TV/Mobile"),
    ("82", Cats.TV_FOREIGN, "TV/Non-English"),
    ("65", Cats.TV, "TV/Packs"),
    ("83", Cats.TV_FOREIGN, "TV/Packs/Non-English"),
    ("79", Cats.TV_SD, "TV/SD/x264"),
    ("22", Cats.TV_WEBDL, "TV/Web-DL"),
    ("5", Cats.TV_HD, "TV/x264"),
    ("99", Cats.TV_HD, "TV/x265"),
    ("4", Cats.TV_SD, "TV/Xvid"),
    ("74", Cats.CONSOLE, "Games"),
    ("2", Cats.CONSOLE_OTHER, "Games/Mixed"),
    ("47", Cats.CONSOLE_OTHER, "Games/Nintendo"),
    ("43", Cats.PC_GAMES, "Games/PC-ISO"),
    ("45", Cats.PC_GAMES, "Games/PC-Rip"),
    ("71", Cats.CONSOLE_PS4, "Games/Playstation"),
    ("50", Cats.CONSOLE_WII, "Games/Wii"),
    ("44", Cats.CONSOLE_XBOX, "Games/Xbox"),
    ("75", Cats.AUDIO, "Music"),
    ("3", Cats.AUDIO_MP3, "Music/Audio"),
    ("80", Cats.AUDIO_LOSSLESS, "Music/Flac"),
    ("93", Cats.AUDIO, "Music/Packs"),
    ("37", Cats.AUDIO_VIDEO, "Music/Video"),
    ("21", Cats.AUDIO_OTHER, "Podcast"),
    ("76", Cats.OTHER, "Miscellaneous"),
    ("60", Cats.TV_ANIME, "Anime"),
    ("1", Cats.PC_0DAY, "Appz"),
    ("86", Cats.PC_0DAY, "Appz/Non-English"),
    ("64", Cats.AUDIO_AUDIOBOOK, "AudioBook"),
    ("35", Cats.BOOKS, "Books"),
    ("102", Cats.BOOKS, "Books/Non-English"),
    ("94", Cats.BOOKS_COMICS, "Comics"),
    ("95", Cats.BOOKS_OTHER, "Educational"),
    ("98", Cats.OTHER, "Fonts"),
    ("69", Cats.PC_MAC, "Mac"),
    ("92", Cats.BOOKS_MAGS, "Magazines / Newspapers"),
    ("58", Cats.PC_MOBILE_OTHER, "Mobile"),
    ("36", Cats.OTHER, "Pics/Wallpapers"),
    ("88", Cats.XXX, "XXX"),
    ("85", Cats.XXX_OTHER, "XXX/Magazines"),
    ("8", Cats.XXX, "XXX/Movie"),
    ("81", Cats.XXX, "XXX/Movie/0Day"),
    ("91", Cats.XXX_PACK, "XXX/Packs"),
    ("84", Cats.XXX_IMAGESET, "XXX/Pics/Wallpapers"),
)


def build_capabilities() -> TorznabCapabilities:
    caps = TorznabCapabilities(
        limits_default=100,
        limits_max=100,
        tv_search_params=[
            TvSearchParam.Q,
            TvSearchParam.SEASON,
            TvSearchParam.EP,
            TvSearchParam.IMDB_ID,
            TvSearchParam.GENRE,
        ],
        movie_search_params=[
            MovieSearchParam.Q,
            MovieSearchParam.IMDB_ID,
            MovieSearchParam.GENRE,
        ],
    )
    for tracker_id, cat, desc in CATEGORY_MAPPINGS:
        caps.add_category(tracker_id, cat, desc)
    return caps


def _with_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


class IPTorrentsIndexer(HttpxIndexerBase):
    """Scrapes the IPTorrents browse page using the user's session cookie.

    Settings:
        freeleech: ``"true"`` restricts results to freeleech torrents.
        sort: site sort order (time, size, seeders, name); default ``time``.
    """

    indexer_type = IPTORRENTS
    description = "IPTorrents is a Private site. Always a step ahead."
    tracker_type = TrackerType.PRIVATE

    def __init__(
        self,
        *,
        indexer_id: str,
        name: str,
        cookie: str,
        user_agent: str | None = None,
        site_url: str | None = None,
        settings: Mapping[str, str] | None = None,
        timeout: float = 30.0,
    ) -> None:
        headers = {"Cookie": cookie} if cookie else {}
        super().__init__(
            indexer_id=indexer_id,
            name=name,
            site_link=_with_trailing_slash(site_url or DEFAULT_SITE_LINK),
            capabilities=build_capabilities(),
            settings=settings,
            headers=headers,
            user_agent=user_agent,
            timeout=timeout,
        )
        self._cookie = cookie
        if not cookie:
            self._log.warning("iptorrents_cookie_missing")

    def is_configured(self) -> bool:
        return bool(self._cookie)

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def build_search_url(self, query: TorznabQuery) -> str:
        params: list[tuple[str, str]] = [
            (cat, "") for cat in self.capabilities.map_torznab_to_tracker(query.categories)
        ]

        if self.settings.get("freeleech") == "true":
            params.append(("free", "on"))

        parts: list[str] = []
        if query.imdb_id:
            parts.append(f"+({query.imdb_id})")
            # IMDb ids only appear in descriptions
            params.append(("qf", "all"))
        elif query.genre:
            parts.append(f"+({query.genre})")

        if query.search_term:
            term = query.search_term
            if query.season is not None and not query.episode:
                term += "*"
            parts.append(f"+({term})")

        episode = query.episode_string()
        if episode:
            parts.append(f"+({episode})")

        if parts:
            params.append(("q", " ".join(parts)))

        params.append(("o", self.settings.get("sort") or "time"))

        if query.limit and query.offset and query.limit > 0 and query.offset > 0:
            params.append(("p", str(query.offset // query.limit + 1)))

        return f"{self.site_link}t?{urlencode(params)}"

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    async def test_connection(self) -> bool:
        resp = await self._get(f"{self.site_link}t", context="test_connection")
        logged_in = LOGGED_IN_MARKER in resp.text
        if not logged_in:
            self._log.warning("iptorrents_test_not_logged_in")
        return logged_in

    async def search(self, query: TorznabQuery) -> list[ReleaseInfo]:
        url = self.build_search_url(query)
        resp = await self._get(
            url, headers={"Referer": f"{self.site_link}t"}, context="search"
        )
        releases = self.parse_search_page(resp.text, query)
        self._log.debug("iptorrents_search_parsed", url=url, results=len(releases))
        return releases

    async def download(self, link: str) -> bytes:
        try:
            resp = await self._get(
                link, headers={"Referer": self.site_link}, context="download"
            )
        except IndexerRequestError as e:
            raise IndexerRequestError(f"Download failed: {e}") from e
        return resp.content

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse_search_page(self, html: str, query: TorznabQuery) -> list[ReleaseInfo]:
        """Turn a browse page into releases.

        Raises:
            IndexerAuthError: The page lacks the logout link (session invalid).
        """
        if LOGGED_IN_MARKER not in html:
            raise IndexerAuthError(
                "The user is not logged in. The cookie may have expired or is incorrect."
            )
        if NO_RESULTS_MARKER in html:
            return []

        soup = parse_html(html)
        table = select_first(soup, *_TABLE_SELECTORS)
        if table is None:
            return []

        rows = select_items(table, "tbody > tr", "tr")
        now = datetime.now(timezone.utc)
        releases: list[ReleaseInfo] = []
        for row in rows:
            release = self._parse_row(row, query, now)
            if release is not None:
                releases.append(release)
        return releases

    def _title_link(self, row: Tag) -> Tag | None:
        for link in row.select("a"):
            href = href_of(link)
            if href.startswith("/t/") and "?" not in href:
                if len(link.get_text()) > 5:
                    return link
        return None

    def _matches_terms(self, title: str, query: TorznabQuery) -> bool:
        if query.imdb_id or query.genre or not query.search_term:
            return True
        lowered = title.lower()
        return all(word in lowered for word in query.search_term.lower().split())

    def _absolute(self, href: str) -> str:
        return f"{self.site_link}{href.lstrip('/')}"

    def _parse_row(
        self, row: Tag, query: TorznabQuery, now: datetime
    ) -> ReleaseInfo | None:
        title_el = self._title_link(row)
        if title_el is None:
            return None

        title = clean_title(title_el.get_text())
        if not title or not self._matches_terms(title, query):
            return None

        details = self._absolute(href_of(title_el))

        link: str | None = None
        for anchor in row.select("a"):
            href = href_of(anchor)
            if "/download" in href:
                link = self._absolute(href)
                break

        categories: list[int] = []
        cat_icon = row.select_one("td:first-child a[href^='?']")
        if cat_icon is not None:
            categories = self.capabilities.map_tracker_to_torznab(
                href_of(cat_icon).lstrip("?")
            )

        description: str | None = None
        publish_date = now
        sub = row.select_one("div.sub, .sub, span.sub")
        if sub is not None:
            parts = sub.get_text().split("|")
            if len(parts) > 1:
                description = f"Tags: {parts[0].strip()}"
            date_text = parts[-1].split(" by ")[0].strip()
            publish_date = parse_time_ago(date_text, now=now)

        cells = row.select("td")
        size: int | None = None
        for cell in cells:
            size = parse_size(cell.get_text())
            if size is not None:
                break

        grabs = seeders = leechers = None
        if len(cells) >= 3:
            grabs = parse_int(cells[-3].get_text())
            seeders = parse_int(cells[-2].get_text())
            leechers = parse_int(cells[-1].get_text())

        peers = seeders + leechers if seeders is not None and leechers is not None else None
        freeleech = row.select_one("span.free") is not None

        return ReleaseInfo(
            title=title,
            guid=details,
            publish_date=publish_date,
            link=link,
            details=details,
            categories=categories,
            size=size,
            grabs=grabs,
            seeders=seeders,
            peers=peers,
            description=description,
            download_volume_factor=0.0 if freeleech else 1.0,
            upload_volume_factor=1.0,
            minimum_ratio=MINIMUM_RATIO,
            minimum_seed_time=MINIMUM_SEED_TIME,
        )
