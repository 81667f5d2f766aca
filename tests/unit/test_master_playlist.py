"""
Unit tests for MasterPlaylist controller and encoding.
"""

from __future__ import annotations

import pytest

from hls_playlist.config.playlist_config import PlaylistConfig
from hls_playlist.models.tags import SimpleTag
from hls_playlist.models.variants import Alternative, SessionData, VariantParams
from hls_playlist.playlist.master import MasterPlaylist
from hls_playlist.playlist.media import MediaPlaylist


def _lines(master: MasterPlaylist) -> list[str]:
    return master.encode().decode("utf-8").splitlines()


class TestMasterPlaylistVariants:
    """Tests for append_variant."""

    def test_append_variant_returns_variant(self) -> None:
        """Test append_variant stores the variant with its chunklist reference."""
        master = MasterPlaylist()
        chunklist = MediaPlaylist(window_size=3, capacity=5)

        variant = master.append_variant("low.m3u8", chunklist, VariantParams(bandwidth=500_000))

        assert variant.chunklist is chunklist
        assert master.variants == [variant]
        assert master.version == 3

    def test_chunklist_is_not_encoded(self) -> None:
        """Test the referenced media playlist never appears in master output."""
        master = MasterPlaylist()
        chunklist = MediaPlaylist(window_size=1, capacity=1)
        chunklist.append("secret-segment.ts", 4.0)

        master.append_variant("low.m3u8", chunklist, VariantParams(bandwidth=500_000))

        assert b"secret-segment" not in master.encode()

    def test_shared_alternative_written_once(self, master_with_shared_audio: MasterPlaylist) -> None:
        """Test two variants sharing one rendition produce a single EXT-X-MEDIA."""
        lines = _lines(master_with_shared_audio)

        assert sum(1 for line in lines if line.startswith("#EXT-X-MEDIA:")) == 1
        assert master_with_shared_audio.version == 4

    def test_media_tag_attributes(self, master_with_shared_audio: MasterPlaylist) -> None:
        """Test EXT-X-MEDIA attribute order and quoting."""
        assert (
            '#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="aud",NAME="English",DEFAULT=YES,'
            'AUTOSELECT=YES,LANGUAGE="en",URI="audio/en.m3u8"'
        ) in _lines(master_with_shared_audio)

    def test_distinct_alternatives_both_written(self, english_audio: Alternative) -> None:
        """Test renditions differing in language are both written."""
        master = MasterPlaylist()
        german = Alternative(type="AUDIO", group_id="aud", name="Deutsch", language="de")
        master.append_variant(
            "v.m3u8", params=VariantParams(bandwidth=1, alternatives=[english_audio, german])
        )

        lines = _lines(master)

        assert sum(1 for line in lines if line.startswith("#EXT-X-MEDIA:")) == 2
        assert '#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="aud",NAME="Deutsch",DEFAULT=NO,LANGUAGE="de"' in lines

    def test_media_tags_precede_variants(self, master_with_shared_audio: MasterPlaylist) -> None:
        """Test every EXT-X-MEDIA line comes before the first stream tag."""
        lines = _lines(master_with_shared_audio)
        media_index = max(i for i, line in enumerate(lines) if line.startswith("#EXT-X-MEDIA:"))
        stream_index = min(i for i, line in enumerate(lines) if line.startswith("#EXT-X-STREAM-INF"))

        assert media_index < stream_index

    def test_stream_inf_attributes(self) -> None:
        """Test EXT-X-STREAM-INF attribute order and formatting."""
        master = MasterPlaylist()
        master.append_variant(
            "hd.m3u8",
            params=VariantParams(
                program_id=1,
                bandwidth=1_280_000,
                average_bandwidth=1_000_000,
                codecs="avc1.4d401f,mp4a.40.2",
                resolution="1280x720",
                audio="aud",
                captions="NONE",
                name="HD",
                frame_rate=29.97,
                video_range="SDR",
            ),
        )

        assert _lines(master)[-2:] == [
            "#EXT-X-STREAM-INF:PROGRAM-ID=1,BANDWIDTH=1280000,AVERAGE-BANDWIDTH=1000000,"
            'CODECS="avc1.4d401f,mp4a.40.2",RESOLUTION=1280x720,AUDIO="aud",'
            'CLOSED-CAPTIONS=NONE,NAME="HD",FRAME-RATE=29.970,VIDEO-RANGE=SDR',
            "hd.m3u8",
        ]

    def test_closed_captions_group_is_quoted(self) -> None:
        """Test a captions group reference other than NONE is quoted."""
        master = MasterPlaylist()
        master.append_variant("v.m3u8", params=VariantParams(bandwidth=1, captions="cc"))

        assert 'CLOSED-CAPTIONS="cc"' in _lines(master)[-2]

    def test_iframe_variant_has_no_uri_line(self) -> None:
        """Test an I-frame variant writes URI as an attribute only."""
        master = MasterPlaylist()
        master.args = "token=abc"
        master.append_variant(
            "iframe.m3u8",
            params=VariantParams(bandwidth=200_000, video="vid", iframe=True),
        )

        assert _lines(master)[-1] == (
            '#EXT-X-I-FRAME-STREAM-INF:PROGRAM-ID=0,BANDWIDTH=200000,VIDEO="vid",URI="iframe.m3u8"'
        )

    @pytest.mark.parametrize(
        ("uri", "expected"),
        [
            ("low.m3u8", "low.m3u8?token=abc"),
            ("low.m3u8?session=1", "low.m3u8?session=1&token=abc"),
        ],
    )
    def test_args_join(self, uri: str, expected: str) -> None:
        """Test the query fragment joins with '&' when the URI has a query."""
        master = MasterPlaylist()
        master.args = "token=abc"
        master.append_variant(uri, params=VariantParams(bandwidth=1))

        assert _lines(master)[-1] == expected


class TestMasterPlaylistSessionData:
    """Tests for EXT-X-SESSION-DATA storage and deduplication."""

    def test_last_write_wins(self) -> None:
        """Test storing the same data id and language replaces the entry."""
        master = MasterPlaylist()
        master.set_session_data(SessionData("com.example.title", value="Old", language="en"))
        master.set_session_data(SessionData("com.example.title", value="New", language="en"))

        assert len(master.session_data) == 1
        assert '#EXT-X-SESSION-DATA:DATA-ID="com.example.title",VALUE="New",LANGUAGE="en"' in _lines(
            master
        )

    def test_case_insensitive_dedup_on_encode(self) -> None:
        """Test entries differing only in case are stored but written once."""
        master = MasterPlaylist()
        master.set_session_data(SessionData("com.example.title", value="First", language="en"))
        master.set_session_data(SessionData("COM.EXAMPLE.TITLE", value="Second", language="EN"))

        lines = [line for line in _lines(master) if line.startswith("#EXT-X-SESSION-DATA")]

        assert len(master.session_data) == 2
        assert lines == ['#EXT-X-SESSION-DATA:DATA-ID="com.example.title",VALUE="First",LANGUAGE="en"']

    def test_entries_without_language_not_deduplicated(self) -> None:
        """Test entries without a language are all written."""
        master = MasterPlaylist()
        master.set_session_data(SessionData("a", value="1"))
        master.set_session_data(SessionData("A", value="2"))

        lines = [line for line in _lines(master) if line.startswith("#EXT-X-SESSION-DATA")]

        assert len(lines) == 2

    def test_value_takes_precedence_over_uri(self) -> None:
        """Test VALUE is written instead of URI when both are set."""
        master = MasterPlaylist()
        master.set_session_data(SessionData("a", value="v", uri="data.json"))
        master.set_session_data(SessionData("b", uri="data.json"))

        lines = [line for line in _lines(master) if line.startswith("#EXT-X-SESSION-DATA")]

        assert lines == [
            '#EXT-X-SESSION-DATA:DATA-ID="a",VALUE="v"',
            '#EXT-X-SESSION-DATA:DATA-ID="b",URI="data.json"',
        ]


class TestMasterPlaylistHeader:
    """Tests for header tags and version."""

    def test_header_order(self) -> None:
        """Test header, independent segments, custom tags, then session data."""
        master = MasterPlaylist()
        master.independent_segments = True
        master.set_custom_tag(SimpleTag("#X-MASTER", "1"))
        master.set_session_data(SessionData("a", value="v"))

        assert _lines(master) == [
            "#EXTM3U",
            "#EXT-X-VERSION:3",
            "#EXT-X-INDEPENDENT-SEGMENTS",
            "#X-MASTER:1",
            '#EXT-X-SESSION-DATA:DATA-ID="a",VALUE="v"',
        ]

    def test_custom_tag_replaced_by_name(self) -> None:
        """Test a custom tag with the same name replaces the previous one."""
        master = MasterPlaylist()
        master.set_custom_tag(SimpleTag("#X-MASTER", "1"))
        master.set_custom_tag(SimpleTag("#X-MASTER", "2"))

        lines = _lines(master)

        assert "#X-MASTER:2" in lines
        assert "#X-MASTER:1" not in lines

    def test_custom_tags_returns_copy(self) -> None:
        """Test editing the returned custom tags does not change the output."""
        master = MasterPlaylist()
        master.set_custom_tag(SimpleTag("#X-MASTER", "1"))
        before = master.encode()

        master.custom_tags.clear()

        assert list(master.custom_tags) == ["#X-MASTER"]
        assert master.encode() is before
        assert "#X-MASTER:1" in _lines(master)

    def test_set_version(self) -> None:
        """Test set_version overrides the written version."""
        master = MasterPlaylist()
        master.set_version(7)

        assert _lines(master)[1] == "#EXT-X-VERSION:7"

    def test_from_config(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test from_config applies version, flag and args."""
        config = PlaylistConfig(version=6, independent_segments=True, args="a=1")

        master = MasterPlaylist.from_config(config)

        assert master.version == 6
        assert master.independent_segments is True
        assert master.args == "a=1"


class TestMasterPlaylistCache:
    """Tests for master encoding cache."""

    def test_encode_twice_returns_same_object(self, master_with_shared_audio: MasterPlaylist) -> None:
        """Test encode without mutation returns the same bytes object."""
        assert master_with_shared_audio.encode() is master_with_shared_audio.encode()

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda m: m.append_variant("extra.m3u8"),
            lambda m: m.set_session_data(SessionData("x", value="y")),
            lambda m: m.set_custom_tag(SimpleTag("#X-NEW")),
            lambda m: m.set_version(6),
            lambda m: m.set_independent_segments(True),
            lambda m: setattr(m, "args", "t=1"),
            lambda m: m.reset_cache(),
        ],
    )
    def test_mutators_invalidate(self, master_with_shared_audio: MasterPlaylist, mutate) -> None:
        """Test every mutator clears the cache."""
        before = master_with_shared_audio.encode()

        mutate(master_with_shared_audio)

        assert master_with_shared_audio.encode() is not before

    def test_str_decodes_encoding(self, master_with_shared_audio: MasterPlaylist) -> None:
        """Test str() returns the decoded playlist text."""
        assert str(master_with_shared_audio).startswith("#EXTM3U\n")
