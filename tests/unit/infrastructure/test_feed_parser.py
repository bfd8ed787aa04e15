"""Tests for decoding remote Torznab/Newznab XML."""

from __future__ import annotations

import pytest

from trawlarr.domain.entities import (
    MovieSearchParam,
    TorznabApiError,
    TvSearchParam,
)
from trawlarr.domain.indexers import IndexerParseError
from trawlarr.infrastructure.torznab import parse_caps, parse_rss

# ---------------------------------------------------------------------------
# Fixture XML
# ---------------------------------------------------------------------------

RSS_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom"
     xmlns:torznab="http://torznab.com/schemas/2015/feed">
  <channel>
    <title>Remote</title>
    <item>
      <title>Ubuntu 24.04 Desktop</title>
      <guid>https://remote.example/details/1</guid>
      <comments>https://remote.example/details/1</comments>
      <pubDate>Tue, 30 Apr 2024 10:00:00 +0000</pubDate>
      <size>6114656256</size>
      <link>https://remote.example/dl/1.torrent</link>
      <category>4000</category>
      <enclosure url="https://remote.example/dl/1.torrent" length="6114656256"
                 type="application/x-bittorrent"/>
      <torznab:attr name="category" value="4000"/>
      <torznab:attr name="category" value="4020"/>
      <torznab:attr name="seeders" value="120"/>
      <torznab:attr name="peers" value="130"/>
      <torznab:attr name="imdbid" value="tt0371746"/>
      <torznab:attr name="downloadvolumefactor" value="0"/>
      <torznab:attr name="uploadvolumefactor" value="1"/>
      <torznab:attr name="genre" value="Linux, ISO"/>
    </item>
    <item>
      <title>Magnet Only</title>
      <link>magnet:?xt=urn:btih:abc</link>
      <enclosure url="magnet:?xt=urn:btih:abc" length="100"/>
    </item>
    <item>
      <guid>no-title</guid>
    </item>
  </channel>
</rss>
"""

CAPS_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<caps>
  <server title="Remote"/>
  <limits default="50" max="200"/>
  <searching>
    <search available="yes" supportedParams="q" searchEngine="raw"/>
    <tv-search available="yes" supportedParams="q,season,ep,tvdbid,bogus"/>
    <movie-search available="yes" supportedParams="q,imdbid"/>
    <music-search available="no" supportedParams="q"/>
    <audio-search available="yes" supportedParams=""/>
    <book-search available="no" supportedParams="q"/>
  </searching>
  <categories>
    <category id="2000" name="Movies">
      <subcat id="2040" name="Movies/HD"/>
    </category>
    <category id="5000" name="TV"/>
  </categories>
</caps>
"""


# ---------------------------------------------------------------------------
# parse_rss
# ---------------------------------------------------------------------------


class TestParseRss:
    def test_items(self) -> None:
        releases = parse_rss(RSS_XML)
        assert len(releases) == 2  # item without title skipped

        first = releases[0]
        assert first.title == "Ubuntu 24.04 Desktop"
        assert first.guid == "https://remote.example/details/1"
        assert first.details == "https://remote.example/details/1"
        assert first.link == "https://remote.example/dl/1.torrent"
        assert first.size == 6114656256
        assert first.categories == [4000, 4020]
        assert first.seeders == 120
        assert first.peers == 130
        assert first.imdb == 371746
        assert first.is_freeleech()
        assert first.genres == ["Linux", "ISO"]
        assert first.publish_date.year == 2024
        assert first.publish_date.utcoffset() is not None

    def test_magnet_link(self) -> None:
        magnet = parse_rss(RSS_XML)[1]
        assert magnet.link is None
        assert magnet.magnet_uri == "magnet:?xt=urn:btih:abc"
        assert magnet.size == 100
        assert magnet.guid == "magnet:?xt=urn:btih:abc"

    def test_bytes_input(self) -> None:
        assert len(parse_rss(RSS_XML.encode("utf-8"))) == 2

    def test_error_document(self) -> None:
        with pytest.raises(TorznabApiError) as exc_info:
            parse_rss('<error code="100" description="Incorrect user credentials"/>')
        assert exc_info.value.code == 100
        assert exc_info.value.description == "Incorrect user credentials"

    def test_malformed(self) -> None:
        with pytest.raises(IndexerParseError):
            parse_rss("<rss><channel>")

    def test_entities_not_expanded(self) -> None:
        xml = (
            '<?xml version="1.0"?>'
            '<!DOCTYPE rss [<!ENTITY x SYSTEM "file:///etc/passwd">]>'
            "<rss><channel><item><title>&x;</title></item></channel></rss>"
        )
        releases = parse_rss(xml)
        assert all("root:" not in r.title for r in releases)


# ---------------------------------------------------------------------------
# parse_caps
# ---------------------------------------------------------------------------


class TestParseCaps:
    def test_limits(self) -> None:
        caps = parse_caps(CAPS_XML)
        assert (caps.limits_default, caps.limits_max) == (50, 200)

    def test_modes(self) -> None:
        caps = parse_caps(CAPS_XML)
        assert caps.supports_raw_search
        assert caps.tv_search_params == [
            TvSearchParam.Q,
            TvSearchParam.SEASON,
            TvSearchParam.EP,
            TvSearchParam.TVDB_ID,
        ]
        assert caps.movie_search_params == [MovieSearchParam.Q, MovieSearchParam.IMDB_ID]
        assert not caps.book_search_available

    def test_audio_search_alias_defaults_to_q(self) -> None:
        caps = parse_caps(CAPS_XML)
        assert caps.music_search_available
        assert [p.value for p in caps.music_search_params] == ["q"]

    def test_categories_flattened(self) -> None:
        caps = parse_caps(CAPS_XML)
        assert caps.torznab_categories() == [2000, 2040, 5000]
        assert caps.map_tracker_to_torznab("2040") == [2040]

    def test_wrong_root(self) -> None:
        with pytest.raises(IndexerParseError):
            parse_caps("<rss/>")

    def test_error_document(self) -> None:
        with pytest.raises(TorznabApiError):
            parse_caps('<error code="900" description="down"/>')
