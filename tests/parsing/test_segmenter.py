import re
import pytest

from statement_import.parsing.segmenter import Block, BlockSequence

LINES = [
    "header",
    "START 1",
    "detail a",
    "END",
    "trailer",
    "START 2",
    "detail b",
    "detail c",
    "START 3",
]


class TestBlockSequence:

    def test_start_only(self):
        blocks = list(BlockSequence(LINES, r"^START"))
        assert [b.start_line for b in blocks] == [1, 5, 8]
        assert blocks[0].lines == ("START 1", "detail a", "END", "trailer")
        assert blocks[1].lines == ("START 2", "detail b", "detail c")
        assert blocks[2].lines == ("START 3",)

    def test_end_line_not_included(self):
        blocks = list(BlockSequence(LINES, r"^START", r"^END"))
        assert blocks[0].lines == ("START 1", "detail a")
        assert blocks[0].end_line == 3
        # no end line before the next start
        assert blocks[1].lines == ("START 2", "detail b", "detail c")

    def test_max_lines(self):
        blocks = list(BlockSequence(LINES, r"^START", max_lines=2))
        assert [b.lines for b in blocks] == [
            ("START 1", "detail a"),
            ("START 2", "detail b"),
            ("START 3",),
        ]

    def test_invalid_max_lines(self):
        with pytest.raises(ValueError):
            BlockSequence(LINES, r"^START", max_lines=0)

    def test_no_start_match(self):
        assert list(BlockSequence(LINES, r"^NOPE")) == []

    def test_restartable(self):
        sequence = BlockSequence(LINES, r"^START", r"^END")
        assert list(sequence) == list(sequence)

    def test_blocks_do_not_overlap(self):
        blocks = list(BlockSequence(LINES, r"START"))
        for previous, current in zip(blocks, blocks[1:]):
            assert previous.end_line <= current.start_line

    def test_compiled_patterns_accepted(self):
        blocks = list(BlockSequence(LINES, re.compile(r"^START 2")))
        assert len(blocks) == 1
        assert blocks[0].end_line == len(LINES)

    def test_block_text(self):
        block = Block(lines=("a", "b"), start_line=0, end_line=2)
        assert block.text == "a\nb"
