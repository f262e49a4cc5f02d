"""Unit tests for page-text element detection."""

import pytest

from app.models.enums import ElementType
from app.services.detection.element_detector import (
    detect_elements,
    is_noise,
    is_slugline,
    strip_character_extensions,
)


def names_of(result):
    return [e.name for e in result.elements]


def by_name(result, name):
    return next(e for e in result.elements if e.name == name)


class TestCharacterAndLocationDetection:
    """Sluglines become locations, standalone ALL-CAPS cues become characters."""

    def test_detects_characters_and_locations(self, make_pages):
        """Test that cues and sluglines are classified correctly."""
        pages = make_pages("INT. HOSPITAL - DAY\n\nDR. SMITH\nWe need to operate.\n\nNURSE JONES\nRight away.")

        result = detect_elements(pages)

        assert by_name(result, "INT. HOSPITAL - DAY").type == ElementType.LOCATION
        assert by_name(result, "DR. SMITH").type == ElementType.CHARACTER
        assert by_name(result, "NURSE JONES").type == ElementType.CHARACTER

    def test_combined_and_exterior_sluglines(self, make_pages):
        """Test INT./EXT. and EXT. sluglines, trailing colon stripped."""
        pages = make_pages("INT./EXT. CAR - DAY\nJohn drives.", "EXT. PARK - NIGHT:\nMary walks.")

        result = detect_elements(pages)

        assert by_name(result, "INT./EXT. CAR - DAY").type == ElementType.LOCATION
        park = by_name(result, "EXT. PARK - NIGHT")
        assert park.highlight_page == 2
        assert park.highlight_text == "EXT. PARK - NIGHT:"

    def test_suggested_departments_follow_type(self, make_pages):
        """Test CHARACTER -> Cast, LOCATION -> Locations, OTHER -> Props."""
        pages = make_pages("INT. GARAGE - DAY\nJOHN\nHe grabs the WRENCH.")

        result = detect_elements(pages)

        assert by_name(result, "INT. GARAGE - DAY").suggested_department == "Locations"
        assert by_name(result, "JOHN").suggested_department == "Cast"
        assert by_name(result, "WRENCH").suggested_department == "Props"

    def test_ignores_single_character_lines(self, make_pages):
        """Test that 'A' on its own line is not an element."""
        result = detect_elements(make_pages("A\n\nJOHN\nHello."))

        assert names_of(result) == ["JOHN"]

    def test_plain_prose_yields_nothing(self, make_pages):
        """Test that text without ALL-CAPS runs produces no elements."""
        result = detect_elements(make_pages("The quick brown fox jumps over the lazy dog."))

        assert result.elements == []
        assert result.scenes == []

    def test_surrounding_whitespace_is_trimmed(self, make_pages):
        """Test that indented cues are still detected."""
        result = detect_elements(make_pages("  JOHN  \nHello.\n\n  MARY  \nHi."))

        assert names_of(result) == ["JOHN", "MARY"]


class TestCharacterIdentity:
    """Extensions collapse to one element; first occurrence wins."""

    def test_extensions_collapse_to_first_occurrence(self, make_pages):
        """Test JOHN, JOHN (V.O.) and JOHN (CONT'D) across pages give one JOHN."""
        pages = make_pages(
            "JOHN (V.O.)\nI remember that day.",
            "JOHN\nCome in!",
            "JOHN (CONT'D)\nAs I was saying.",
        )

        result = detect_elements(pages)

        johns = [e for e in result.elements if e.name.startswith("JOHN")]
        assert len(johns) == 1
        assert johns[0].name == "JOHN"
        assert johns[0].highlight_page == 1
        assert johns[0].highlight_text == "JOHN (V.O.)"

    @pytest.mark.parametrize(
        "cue",
        ["MARY (CONT'D)", "MARY (CONT’D)", "MARY CONT'D", "MARY (O.S.)"],
    )
    def test_strip_character_extensions(self, cue):
        """Test straight and curly CONT'D, with and without parentheses."""
        assert strip_character_extensions(cue) == "MARY"


class TestNoiseFiltering:
    """Transitions and camera directions are never elements."""

    def test_noise_lines_produce_no_elements(self, make_pages):
        """Test FADE IN:, CONTINUED, CUT TO: and FADE OUT. are dropped."""
        pages = make_pages("FADE IN:\n\nINT. OFFICE - DAY\n\nJOHN\nHello.\n\nCONTINUED\n\nCUT TO:\n\nFADE OUT.")

        names = names_of(detect_elements(pages))

        for noise in ("FADE IN", "CONTINUED", "CUT TO", "FADE OUT", "FADE OUT."):
            assert noise not in names
        assert "JOHN" in names

    def test_words_containing_noise_are_props(self, make_pages):
        """Test PANEL and FADED are not mistaken for PAN and FADE."""
        pages = make_pages("She pries open the PANEL.\nA FADED photograph hangs there.")

        result = detect_elements(pages)

        assert by_name(result, "PANEL").type == ElementType.OTHER
        assert by_name(result, "FADED").type == ElementType.OTHER

    @pytest.mark.parametrize(
        "candidate,expected",
        [
            ("FADE IN", True),
            ("FADE IN:", True),
            ("CUT TO BLACK", True),
            ("ANGLE ON JOHN", True),
            ("V.O.", True),
            ("PAN", True),
            ("PANEL", False),
            ("FADED", False),
            ("LATERAL", False),
        ],
    )
    def test_is_noise(self, candidate, expected):
        """Test exact and prefix-followed-by-separator noise matching."""
        assert is_noise(candidate) is expected


class TestPropDetection:
    """Embedded ALL-CAPS runs in action lines become OTHER elements."""

    def test_multi_word_props(self, make_pages):
        """Test that adjacent caps words form one prop."""
        result = detect_elements(make_pages("She opens the RED BOX slowly."))

        prop = by_name(result, "RED BOX")
        assert prop.type == ElementType.OTHER
        assert prop.highlight_text == "She opens the RED BOX slowly."

    def test_hyphenated_compounds_split(self, make_pages):
        """Test the known limitation: SEMI-AUTOMATIC splits at the hyphen."""
        names = names_of(detect_elements(make_pages("He loads the SEMI-AUTOMATIC rifle.")))

        assert "SEMI" in names
        assert "SEMI-AUTOMATIC" not in names

    def test_short_words_are_ignored(self, make_pages):
        """Test that two-letter caps words are not props."""
        result = detect_elements(make_pages("He turns on the TV and reads."))

        assert result.elements == []

    def test_prop_dedup_keeps_first_page(self, make_pages):
        """Test that a prop mentioned on two pages keeps the first."""
        result = detect_elements(make_pages("He holds a TORCH.", "The TORCH dies."))

        assert by_name(result, "TORCH").highlight_page == 1


class TestSceneTracking:
    """Each slugline opens exactly one scene."""

    def test_sequential_scenes_with_unique_characters(self, make_pages):
        """Test scene numbering and per-scene character sets."""
        pages = make_pages(
            "INT. KITCHEN - DAY\nJOHN\nHi.\nMARY\nHello.\nJOHN (CONT'D)\nAgain.",
            "EXT. YARD - NIGHT\nMARY\nBye.",
        )

        result = detect_elements(pages)

        assert [s.scene_number for s in result.scenes] == [1, 2]
        assert result.scenes[0].location == "INT. KITCHEN - DAY"
        assert result.scenes[0].characters == ["JOHN", "MARY"]
        assert result.scenes[1].characters == ["MARY"]
        assert result.scene_data()[1] == {
            "scene_number": 2,
            "location": "EXT. YARD - NIGHT",
            "characters": ["MARY"],
        }

    def test_characters_before_first_slugline_have_no_scene(self, make_pages):
        """Test that cues before any slugline are elements without a scene."""
        result = detect_elements(make_pages("JOHN\nHello."))

        assert names_of(result) == ["JOHN"]
        assert result.scenes == []


class TestOrdering:
    """Output is ordered by page, then by name."""

    def test_sorted_by_page_then_name(self, make_pages):
        """Test the output order."""
        pages = make_pages("ZED\nHi.\nADAM\nHey.", "BOB\nYo.")

        result = detect_elements(pages)

        assert names_of(result) == ["ADAM", "ZED", "BOB"]

    def test_is_slugline_is_case_insensitive(self):
        """Test slugline detection ignores case but needs a space."""
        assert is_slugline("int. office - day")
        assert is_slugline("I/E. VAN - DAY")
        assert not is_slugline("INTERIOR OFFICE")
