"""Unit tests for the element matcher."""

from uuid import uuid4

import pytest

from app.models.enums import ElementSource, ElementStatus, ElementType, MatchStatus
from app.models.matching import ExistingElement
from app.models.screenplay import DetectedElement
from app.services.matching.element_matcher import match_elements, normalize_name, similarity


def existing(name, status=ElementStatus.ACTIVE, source=ElementSource.AUTO, type="CHARACTER"):
    return ExistingElement(id=uuid4(), name=name, type=type, status=status, source=source)


def detected(name, type=ElementType.CHARACTER, page=1):
    return DetectedElement(name=name, type=type, highlight_page=page, highlight_text=name)


class TestSimilarity:
    """Normalized Levenshtein similarity."""

    @pytest.mark.parametrize("name", ["", "JOHN", "JOHN SMITH", "DR. O'NEIL"])
    def test_identity(self, name):
        """Test similarity(a, a) == 1."""
        assert similarity(name, name) == 1.0

    @pytest.mark.parametrize("a,b", [("JOHN", "XAVIER"), ("JOHN SMITH", "JOHN SMITHE"), ("", "BOB")])
    def test_symmetric_and_bounded(self, a, b):
        """Test symmetry and the [0, 1] range."""
        assert similarity(a, b) == similarity(b, a)
        assert 0.0 <= similarity(a, b) <= 1.0

    def test_known_values(self):
        """Test the reference pairs around the threshold."""
        assert similarity("JOHN SMITH", "JOHN SMITHE") == pytest.approx(1 - 1 / 11)
        assert similarity("JOHN", "XAVIER") < 0.7
        assert similarity("", "ABC") == 0.0

    def test_normalize_name(self):
        """Test trim, upper-case and whitespace collapse."""
        assert normalize_name("  john \t  smith ") == "JOHN SMITH"


class TestMatchElements:
    """EXACT / FUZZY / NEW / MISSING classification."""

    def test_exact_fuzzy_new_and_missing(self):
        """Test the reference reconciliation set."""
        john, smith, bob = existing("JOHN"), existing("JOHN SMITH"), existing("BOB")

        report = match_elements(
            [john, smith, bob],
            [detected("JOHN"), detected("JOHN SMITHE"), detected("XAVIER")],
        )

        statuses = {m.detected_name: m for m in report.matches}
        assert statuses["JOHN"].status == MatchStatus.EXACT
        assert statuses["JOHN"].old_element_id == john.id
        assert statuses["JOHN"].similarity == 1.0
        assert statuses["JOHN SMITHE"].status == MatchStatus.FUZZY
        assert statuses["JOHN SMITHE"].old_element_id == smith.id
        assert statuses["JOHN SMITHE"].similarity > 0.7
        assert statuses["XAVIER"].status == MatchStatus.NEW
        assert statuses["XAVIER"].old_element_id is None
        assert [m.id for m in report.missing] == [bob.id]
        assert report.needs_reconciliation

    def test_below_threshold_is_new_and_existing_is_missing(self):
        """Test JOHN vs XAVIER gives NEW and leaves JOHN missing."""
        john = existing("JOHN")

        report = match_elements([john], [detected("XAVIER")])

        assert report.matches[0].status == MatchStatus.NEW
        assert [m.name for m in report.missing] == ["JOHN"]

    def test_case_and_whitespace_insensitive(self):
        """Test 'John  Smith' matches 'JOHN SMITH' exactly."""
        report = match_elements([existing("John  Smith")], [detected("JOHN SMITH")])

        assert report.matches[0].status == MatchStatus.EXACT
        assert report.missing == []
        assert not report.needs_reconciliation

    def test_archived_elements_never_participate(self):
        """Test archived elements are neither matched nor missing."""
        archived = existing("JOHN", status=ElementStatus.ARCHIVED)

        report = match_elements([archived], [detected("JOHN"), detected("JOHNNY")])

        assert all(m.old_element_id != archived.id for m in report.matches)
        assert [m.status for m in report.matches] == [MatchStatus.NEW, MatchStatus.NEW]
        assert report.missing == []

    def test_consumption_is_injective(self):
        """Test each existing element is consumed at most once."""
        pool = [existing("MARY"), existing("MARIE")]

        report = match_elements(pool, [detected("MARY"), detected("MARY"), detected("MARYE"), detected("MARI")])

        old_ids = [m.old_element_id for m in report.matches if m.old_element_id is not None]
        assert len(old_ids) == len(set(old_ids))

    def test_duplicate_existing_names_escalate_second_detection(self):
        """Test a second detection of a shared name falls through to a FUZZY match."""
        first, second = existing("GUARD"), existing("GUARD")

        report = match_elements([first, second], [detected("GUARD"), detected("Guard ")])

        assert [m.status for m in report.matches] == [MatchStatus.EXACT, MatchStatus.FUZZY]
        assert [m.old_element_id for m in report.matches] == [first.id, second.id]
        assert report.matches[1].similarity == 1.0
        assert report.missing == []

    def test_fuzzy_tie_goes_to_first_in_pool(self):
        """Test ties keep the first pooled element."""
        first, second = existing("JOHN SMITHA"), existing("JOHN SMITHB")

        report = match_elements([first, second], [detected("JOHN SMITHC")])

        assert report.matches[0].status == MatchStatus.FUZZY
        assert report.matches[0].old_element_id == first.id
        assert [m.id for m in report.missing] == [second.id]

    def test_type_and_source_are_not_identity(self):
        """Test MANUAL elements and differing types still match by name."""
        manual_prop = existing("ROSE", source=ElementSource.MANUAL, type="OTHER")

        report = match_elements([manual_prop], [detected("ROSE", type=ElementType.CHARACTER)])

        assert report.matches[0].status == MatchStatus.EXACT
        assert report.matches[0].detected_type == "CHARACTER"

    def test_threshold_is_configurable(self):
        """Test that a stricter threshold turns a fuzzy match into NEW."""
        report = match_elements([existing("JOHN SMITH")], [detected("JOHN SMITHE")], threshold=0.95)

        assert report.matches[0].status == MatchStatus.NEW
        assert len(report.missing) == 1

    def test_empty_inputs(self):
        """Test that no input gives an empty report."""
        report = match_elements([], [])

        assert report.matches == []
        assert report.missing == []
