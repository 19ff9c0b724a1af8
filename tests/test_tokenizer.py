"""Tests for tokenizer module."""

import pytest

from minish.tokenizer import split_line


class TestSplitLine:
    """Test split_line function."""

    def test_split_simple(self):
        """Test splitting a command and its arguments."""
        assert split_line("ls -l /tmp") == ["ls", "-l", "/tmp"]

    @pytest.mark.parametrize("line", ["", " ", "\t", "  \t  "])
    def test_blank_input_yields_no_tokens(self, line):
        """Test that empty or whitespace-only input produces no tokens."""
        assert split_line(line) == []

    def test_runs_of_spaces_and_tabs(self):
        """Test that mixed whitespace runs separate tokens."""
        assert split_line("  echo \t a   b\t") == ["echo", "a", "b"]

    def test_quotes_are_ordinary_text(self):
        """Test that quoting has no special meaning."""
        assert split_line('echo "this message"') == ["echo", '"this', 'message"']

    def test_backslash_is_ordinary_text(self):
        """Test that backslashes do not escape whitespace."""
        assert split_line(r"touch a\ b") == ["touch", "a\\", "b"]

    @pytest.mark.parametrize(
        "line",
        [
            "cd   /tmp",
            "\tgrep  -r  foo\t.\t",
            'echo "a   b" c',
            "   ",
        ],
    )
    def test_idempotent_after_rejoin(self, line):
        """Test that re-joining tokens with single spaces re-tokenizes the same."""
        tokens = split_line(line)

        assert split_line(" ".join(tokens)) == tokens
