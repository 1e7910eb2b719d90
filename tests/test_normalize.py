"""Tests for line-number prefix stripping."""

from transcript_viewer.normalize import normalize_line, normalize_lines


class TestNormalizeLine:
    def test_strips_padded_prefix(self):
        assert normalize_line("     1→> hello") == "> hello"

    def test_strips_unpadded_prefix(self):
        assert normalize_line("42→● Read(a.py)") == "● Read(a.py)"

    def test_keeps_indentation_after_arrow(self):
        assert normalize_line("   12→  ⎿  done") == "  ⎿  done"

    def test_empty_remainder(self):
        assert normalize_line("    7→") == ""

    def test_plain_line_unchanged(self):
        assert normalize_line("● Hello") == "● Hello"

    def test_arrow_without_digits_unchanged(self):
        assert normalize_line("x→y") == "x→y"
        assert normalize_line("→ next") == "→ next"


class TestNormalizeLines:
    def test_preserves_line_count(self):
        text = "  1→a\n  2→b\nplain\n"
        assert normalize_lines(text) == ["a", "b", "plain", ""]

    def test_idempotent_on_normalized_text(self, sample_transcript):
        once = normalize_lines(sample_transcript)
        twice = normalize_lines("\n".join(once))
        assert twice == once

    def test_empty_text(self):
        assert normalize_lines("") == [""]

    def test_only_ascii_digits_form_a_prefix(self):
        assert normalize_line("٣→x") == "٣→x"
        assert normalize_line("　 1→x") == "　 1→x"
