"""Unit tests for action payload extraction."""
from hypothesis import given
from hypothesis import strategies as st

from xrozen.session import ACTION_MARKER, decode_action_payload, extract_action_payload


class TestExtractActionPayload:
    """Tests for extract_action_payload."""

    def test_text_without_marker_is_untouched(self):
        """Test that plain replies come back unchanged."""
        extraction = extract_action_payload("  Just an answer.  ")

        assert extraction.display_text == "  Just an answer.  "
        assert extraction.payload is None

    def test_strips_block_and_trims(self):
        """Test the documented example reply."""
        text = 'Sure!__ACTION_DATA__{"type":"create_project"}__ACTION_DATA__ Done.'

        extraction = extract_action_payload(text)

        assert extraction.display_text == "Sure! Done."
        assert extraction.payload == '{"type":"create_project"}'

    def test_block_at_end_is_trimmed(self):
        """Test that whitespace left by a trailing block is trimmed."""
        text = 'Creating it now. __ACTION_DATA__{"type":"add_client"}__ACTION_DATA__'

        extraction = extract_action_payload(text)

        assert extraction.display_text == "Creating it now."
        assert extraction.payload == '{"type":"add_client"}'

    def test_all_blocks_removed_first_reported(self):
        """Test that every block is stripped and the first one is returned."""
        text = "A__ACTION_DATA__one__ACTION_DATA__ B __ACTION_DATA__two__ACTION_DATA__C"

        extraction = extract_action_payload(text)

        assert extraction.display_text == "A B C"
        assert extraction.payload == "one"

    def test_single_marker_is_not_a_block(self):
        """Test that an unmatched marker is left in place."""
        text = "Look at __ACTION_DATA__ here"

        extraction = extract_action_payload(text)

        assert extraction.display_text == text
        assert extraction.payload is None

    def test_empty_block_is_not_a_payload(self):
        """Test that two adjacent markers carry no payload."""
        text = "x__ACTION_DATA____ACTION_DATA__y"

        assert extract_action_payload(text).payload is None

    def test_block_does_not_span_lines(self):
        """Test that a payload must sit on one line."""
        text = "a__ACTION_DATA__{\n}__ACTION_DATA__b"

        extraction = extract_action_payload(text)

        assert extraction.payload is None
        assert extraction.display_text == text

    @given(st.text(alphabet=st.characters(blacklist_characters="_\n"), min_size=1))
    def test_display_text_never_contains_marker(self, payload: str):
        """Property test: a stripped reply never shows the marker."""
        text = f"Hi {ACTION_MARKER}{payload}{ACTION_MARKER} there"

        extraction = extract_action_payload(text)

        assert ACTION_MARKER not in extraction.display_text
        assert extraction.payload == payload


class TestDecodeActionPayload:
    """Tests for decode_action_payload."""

    def test_decodes_json_object(self):
        """Test decoding a JSON object payload."""
        assert decode_action_payload('{"type": "create_project", "name": "Video"}') == {
            "type": "create_project",
            "name": "Video",
        }

    def test_none_and_empty(self):
        """Test that missing payloads decode to None."""
        assert decode_action_payload(None) is None
        assert decode_action_payload("") is None

    def test_invalid_json(self):
        """Test that malformed JSON decodes to None."""
        assert decode_action_payload("{not json") is None

    def test_non_object_json(self):
        """Test that JSON that is not an object decodes to None."""
        assert decode_action_payload("[1, 2]") is None
