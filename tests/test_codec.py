"""Tests for the chart annotation codec"""

import pytest

from chartnotes.codec import ChartCodec, ChartEntry, ChartNotes, parse_segments, split_segments
from chartnotes.timeframes import TimeframeTable


@pytest.fixture
def codec():
    return ChartCodec()


class TestEncode:
    """Tests for ChartCodec.encode"""

    def test_single_entry_without_images(self, codec):
        """Test one entry produces a header and its notes"""
        result = codec.encode([ChartEntry(timeframe="1h", notes="Breakout confirmed")])

        assert result.notes == "[1 Hour]\nBreakout confirmed"
        assert result.images == []

    def test_two_entries_joined_by_blank_line(self, codec):
        """Test blocks are separated by exactly one double newline"""
        result = codec.encode([
            ChartEntry(timeframe="1h", notes="first"),
            ChartEntry(timeframe="15m", images=["b.png"], notes=""),
        ])

        assert result.notes == "[1 Hour]\nfirst\n\n[15 Minutes]\n"
        assert result.images == ["b.png"]

    def test_empty_first_body_still_one_separator(self, codec):
        """Test an empty body does not add extra separators"""
        result = codec.encode([
            ChartEntry(timeframe="1d", images=["a.png"]),
            ChartEntry(timeframe="1h", notes="second"),
        ])

        assert result.notes == "[1 Day]\n" + "\n\n" + "[1 Hour]\nsecond"

    def test_notes_are_trimmed(self, codec):
        """Test surrounding whitespace is not stored"""
        result = codec.encode([ChartEntry(timeframe="5m", notes="  tap of the OB \n")])

        assert result.notes == "[5 Minutes]\ntap of the OB"

    def test_empty_entries_are_dropped(self, codec):
        """Test entries with no images and blank notes are not stored"""
        result = codec.encode([
            ChartEntry(timeframe="4h", notes="   \n"),
            ChartEntry(timeframe="1h", images=["x.png"], notes="kept"),
            ChartEntry(timeframe="1d"),
        ])

        assert result.notes == "[1 Hour]\nkept"
        assert result.images == ["x.png"]

    def test_all_empty_gives_empty_storage(self, codec):
        """Test nothing to store yields empty fields"""
        result = codec.encode(codec.default_entries())

        assert result == ChartNotes(notes="", images=[])
        assert result.is_empty

    def test_images_flattened_in_entry_order(self, codec):
        """Test multi-image entries keep their order in the flat list"""
        result = codec.encode([
            ChartEntry(timeframe="4h", images=["a.png", "b.png"]),
            ChartEntry(timeframe="1h", images=["c.png"]),
        ])

        assert result.images == ["a.png", "b.png", "c.png"]

    def test_unresolved_timeframe_uses_default_label(self, codec):
        """Test entries decoded from legacy text re-encode under the default"""
        result = codec.encode([ChartEntry(timeframe=None, notes="old notes")])

        assert result.notes == "[4 Hours]\nold notes"


class TestDecode:
    """Tests for ChartCodec.decode"""

    def test_empty_input_gives_default_entry(self, codec):
        """Test the editor always gets one entry"""
        entries = codec.decode("", [])

        assert len(entries) == 1
        assert entries[0].timeframe == "4h"
        assert entries[0].notes == ""
        assert entries[0].images == []

    def test_none_input_treated_as_empty(self, codec):
        entries = codec.decode(None, None)

        assert entries == [ChartEntry(timeframe="4h")]

    def test_legacy_unbracketed_text(self, codec):
        """Test text without headers becomes one unlabelled entry"""
        entries = codec.decode("just some old notes", ["img1.png"])

        assert len(entries) == 1
        assert entries[0].timeframe is None
        assert entries[0].notes == "just some old notes"
        assert entries[0].images == ["img1.png"]

    def test_sections_resolve_timeframes(self, codec):
        """Test labels map back to tokens and images pair by position"""
        entries = codec.decode(
            "[1 Hour]\nfirst\n\n[15 Minutes]\nsecond",
            ["a.png", "b.png"],
        )

        assert entries == [
            ChartEntry(timeframe="1h", images=["a.png"], notes="first"),
            ChartEntry(timeframe="15m", images=["b.png"], notes="second"),
        ]

    def test_unknown_label_falls_back_to_default(self, codec):
        """Test unknown labels resolve to the default timeframe"""
        entries = codec.decode("[90 Minutes]\nodd chart", [])

        assert entries[0].timeframe == "4h"
        assert entries[0].notes == "odd chart"

    def test_more_images_than_sections(self, codec):
        """Test extra images get their own default entries"""
        entries = codec.decode("[1 Hour]\nonly one", ["a.png", "b.png", "c.png"])

        assert len(entries) == 3
        assert entries[0] == ChartEntry(timeframe="1h", images=["a.png"], notes="only one")
        assert entries[1] == ChartEntry(timeframe="4h", images=["b.png"], notes="")
        assert entries[2].images == ["c.png"]

    def test_fewer_images_than_sections(self, codec):
        """Test sections past the image count have no images"""
        entries = codec.decode("[1 Hour]\na\n\n[1 Day]\nb", ["a.png"])

        assert entries[0].images == ["a.png"]
        assert entries[1].images == []

    def test_images_without_notes(self, codec):
        entries = codec.decode("", ["a.png", "b.png"])

        assert [e.images for e in entries] == [["a.png"], ["b.png"]]
        assert all(e.timeframe == "4h" for e in entries)

    def test_header_with_empty_body(self, codec):
        entries = codec.decode("[1 Week]\n", ["w.png"])

        assert entries == [ChartEntry(timeframe="1w", images=["w.png"], notes="")]

    def test_text_before_first_header(self, codec):
        """Test leading legacy text is kept ahead of labelled sections"""
        entries = codec.decode("old text\n\n[1 Hour]\nnew", [])

        assert entries[0] == ChartEntry(timeframe=None, notes="old text")
        assert entries[1] == ChartEntry(timeframe="1h", notes="new")

    @pytest.mark.parametrize("notes", ["[", "]]", "[]", "[unclosed\nfoo", "\n\n\n", "[a]]b"])
    def test_malformed_text_never_raises(self, codec, notes):
        """Test decode is total over odd inputs"""
        entries = codec.decode(notes, ["x.png"])

        assert len(entries) >= 1

    def test_decode_notes_accepts_stored_pair(self, codec):
        stored = ChartNotes(notes="[1 Hour]\nx", images=["a.png"])

        assert codec.decode_notes(stored) == codec.decode(stored.notes, stored.images)


class TestRoundTrip:
    """Tests for decode/encode stability"""

    def test_decoded_list_survives_reencode(self, codec):
        """Test decode(encode(entries)) == entries for decoded input"""
        notes = "[1 Hour]\nfirst\n\n[15 Minutes]\n\n\n[1 Day]\nthird"
        images = ["a.png", "b.png"]

        entries = codec.decode(notes, images)
        stored = codec.encode(entries)

        assert stored.notes == notes
        assert stored.images == images
        assert codec.decode(stored.notes, stored.images) == entries

    def test_blank_lines_inside_notes_survive(self, codec):
        """Test paragraph breaks in notes do not split sections"""
        entries = [ChartEntry(timeframe="1h", images=["a.png"], notes="line one\n\nline two")]

        stored = codec.encode(entries)

        assert codec.decode(stored.notes, stored.images) == entries

    def test_extra_image_entries_round_trip(self, codec):
        entries = codec.decode("[1 Hour]\nonly one", ["a.png", "b.png"])

        stored = codec.encode(entries)

        assert stored.notes == "[1 Hour]\nonly one\n\n[4 Hours]\n"
        assert codec.decode(stored.notes, stored.images) == entries

    def test_bracketed_lines_in_notes_survive(self, codec):
        """Test notes lines starting with a bracket stay inside their entry"""
        entries = [
            ChartEntry(timeframe="1h", images=["a.png"], notes="[PDH] swept\nthen reversed"),
            ChartEntry(timeframe="1d", notes="[Bias]\nbullish\n[Target]"),
        ]

        stored = codec.encode(entries)

        assert stored.notes == "[1 Hour]\n[PDH] swept\nthen reversed\n\n[1 Day]\n[Bias]\nbullish\n[Target]"
        assert codec.decode(stored.notes, stored.images) == entries
        assert codec.encode(codec.decode(stored.notes, stored.images)) == stored

    def test_image_only_entry_after_notes_only_entry(self, codec):
        """Test positional pairing moves the image to the first section"""
        entries = codec.decode("[4 Hours]\nx\n\n[1 Hour]\n", ["a.png"])

        assert entries == [
            ChartEntry(timeframe="4h", images=["a.png"], notes="x"),
            ChartEntry(timeframe="1h"),
        ]
        assert codec.encode(entries).notes == "[4 Hours]\nx"

    def test_custom_table(self):
        """Test the codec uses the injected label table both ways"""
        table = TimeframeTable.from_pairs([("4h", "4 Hour"), ("1h", "1 Hour")])
        codec = ChartCodec(table)

        stored = codec.encode([ChartEntry(timeframe="4h", images=["a.png"], notes="setup")])

        assert stored.notes == "[4 Hour]\nsetup"
        assert codec.decode(stored.notes, stored.images)[0].timeframe == "4h"


class TestSegments:
    """Tests for section splitting"""

    def test_split_on_line_start_headers(self):
        raw = split_segments("[1 Hour]\na\n\n[1 Day]\nb")

        assert raw == ["[1 Hour]\na\n\n", "[1 Day]\nb"]

    def test_bracket_inside_line_does_not_split(self):
        """Test only headers at line start begin a section"""
        segments = parse_segments("[1 Hour]\nbroke the [PDH] level")

        assert len(segments) == 1
        assert segments[0].label == "1 Hour"
        assert segments[0].notes == "broke the [PDH] level"

    def test_header_needs_own_line_after_blank_line(self):
        """Test a bracket followed by text, or after a single newline, is body text"""
        assert split_segments("[1 Hour]\n[PDH] swept") == ["[1 Hour]\n[PDH] swept"]
        assert split_segments("[1 Hour]\na\n[1 Day]\nb") == ["[1 Hour]\na\n[1 Day]\nb"]

    def test_bracketed_legacy_text_has_no_label(self):
        segments = parse_segments("[PDH] swept\nthen reversed")

        assert segments[0].label is None
        assert segments[0].notes == "[PDH] swept\nthen reversed"

    def test_blank_text_has_no_segments(self):
        assert split_segments("") == []
        assert split_segments("  \n\n ") == []
