"""Unit tests for the topic sanitizer."""

import re

import pytest

from repo_provisioner.services.topic_sanitizer import (
    MAX_TOPIC_LENGTH,
    sanitize_topics,
    split_topics,
)

_TOPIC_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")


class TestBasicSanitization:
    """Tests for the normalisation steps."""

    def test_lowercases(self):
        assert sanitize_topics(["PIANO", "GUITAR", "DRUMS"]) == ["piano", "guitar", "drums"]

    def test_trims_whitespace(self):
        assert sanitize_topics(["  piano  ", "\tguitar\n"]) == ["piano", "guitar"]

    def test_replaces_invalid_characters_with_hyphens(self):
        result = sanitize_topics(["rock & roll", "jazz/blues", "pop+rock"])
        assert result == ["rock---roll", "jazz-blues", "pop-rock"]

    def test_strips_leading_and_trailing_hyphens(self):
        assert sanitize_topics(["-piano-", "--guitar--"]) == ["piano", "guitar"]

    def test_punctuation_at_the_edges_disappears(self):
        assert sanitize_topics(["rock!", "jazz?", "blues..."]) == ["rock", "jazz", "blues"]

    def test_truncates_to_fifty_characters(self):
        result = sanitize_topics(["a" * 60, "guitar"])
        assert result[0] == "a" * MAX_TOPIC_LENGTH
        assert result[1] == "guitar"

    def test_truncation_does_not_leave_trailing_hyphen(self):
        result = sanitize_topics(["a" * 49 + "-b"])
        assert result == ["a" * 49]

    def test_non_ascii_letters_become_hyphens(self):
        assert sanitize_topics(["Ünïcode"]) == ["n-code"]


class TestFiltering:
    """Tests for dropping labels that cannot be topics."""

    def test_drops_empty_and_all_hyphen_labels(self):
        assert sanitize_topics(["", "   ", "---", "!!!", "ok"]) == ["ok"]

    def test_none_yields_empty_list(self):
        assert sanitize_topics(None) == []

    def test_empty_sequence_yields_empty_list(self):
        assert sanitize_topics([]) == []

    def test_preserves_input_order(self):
        assert sanitize_topics(["zeta", "@@", "alpha", "mid"]) == ["zeta", "alpha", "mid"]


class TestSplitTopics:
    """Tests for comma-separated theme strings."""

    def test_splits_on_commas(self):
        assert split_topics("piano,jazz") == ["piano", "jazz"]

    def test_handles_spaces_around_commas(self):
        assert split_topics(" Piano , Jazz Fusion ,") == ["piano", "jazz-fusion"]

    @pytest.mark.parametrize("text", [None, "", ",,,"])
    def test_blank_input(self, text):
        assert split_topics(text) == []


class TestInvariants:
    """Grammar and idempotence over a mixed corpus."""

    CORPUS = [
        "Rock & Roll",
        "  --Lo-Fi--  ",
        "x" * 49 + "--y",
        "C++",
        "日本語",
        "piano",
        "a" * 120,
        "-",
        "Jazz (Bebop)",
    ]

    def test_output_matches_grammar_and_length(self):
        for topic in sanitize_topics(self.CORPUS):
            assert _TOPIC_RE.match(topic)
            assert len(topic) <= MAX_TOPIC_LENGTH

    def test_idempotent(self):
        once = sanitize_topics(self.CORPUS)
        assert sanitize_topics(once) == once
