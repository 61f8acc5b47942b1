# tests/test_matcher.py
# Unit tests for strict-then-loose converted file matching

from session_repair.matcher import find_loose_matches, match_converted_file
from session_repair.models import MatchConfidence, SessionRecord, StoredFile


def files(*names):
    return [StoredFile(name=n) for n in names]


def session(id="abc12345-0000", email="alice@x.com"):
    return SessionRecord(id=id, user_email=email, status="processing")


class TestStrictMatch:
    """Exact name or session id prefix"""

    def test_exact_basename(self):
        match = match_converted_file("clip.mp4", session(), files("other.mp4", "clip.mp4"))
        assert match.basename == "clip.mp4"
        assert match.confidence == MatchConfidence.STRICT

    def test_id_prefix_keeps_expected_basename(self):
        """Id prefix hit still addresses the derived basename"""
        match = match_converted_file("clip.mp4", session(), files("abc12345_converted.mp4"))
        assert match.basename == "clip.mp4"
        assert match.confidence == MatchConfidence.STRICT
        assert match.candidates == ["abc12345_converted.mp4"]

    def test_strict_wins_over_loose(self):
        """Loose candidates are not consulted when strict succeeds"""
        match = match_converted_file("clip.mp4", session(), files("alice_1.mp4", "clip.mp4"))
        assert match.confidence == MatchConfidence.STRICT
        assert match.basename == "clip.mp4"


class TestLooseMatch:
    """Fallback on email local part or id prefix in MP4 names"""

    def test_email_local_part(self):
        match = match_converted_file("clip.mp4", session(), files("alice_interview.mp4"))
        assert match.basename == "alice_interview.mp4"
        assert match.confidence == MatchConfidence.LOOSE

    def test_requires_mp4(self):
        """Non-MP4 names never match loosely"""
        assert match_converted_file("clip.mp4", session(), files("alice_interview.webm")) is None

    def test_first_listed_wins_and_is_ambiguous(self):
        match = match_converted_file("clip.mp4", session(), files("alice_b.mp4", "alice_a.mp4"))
        assert match.basename == "alice_b.mp4"
        assert match.confidence == MatchConfidence.AMBIGUOUS
        assert match.is_ambiguous
        assert match.candidates == ["alice_b.mp4", "alice_a.mp4"]

    def test_no_match(self):
        assert match_converted_file("clip.mp4", session(), files("bob.mp4", "carol.mp4")) is None

    def test_empty_listing(self):
        assert match_converted_file("clip.mp4", session(), []) is None

    def test_empty_email_does_not_match_everything(self):
        """A blank email local part is not used as a needle"""
        assert find_loose_matches(session(email=""), files("bob.mp4", "carol.mp4")) == []
