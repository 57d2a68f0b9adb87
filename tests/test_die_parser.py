"""Tests for the Die model and dice argument parsing."""

import pytest

from fairdice.errors import InvalidArgument
from fairdice.game.parser import parse_dice, parse_die
from fairdice.models.die import Die


class TestDie:
    def test_str(self) -> None:
        assert str(Die((2, 2, 4, 4, 9, 9))) == "[2,2,4,4,9,9]"

    def test_faces_are_tuple(self) -> None:
        d = Die([1, 2, 3])  # type: ignore[arg-type]
        assert d.faces == (1, 2, 3)
        assert d.face_count == 3

    def test_immutable(self) -> None:
        d = Die((1, 2, 3))
        with pytest.raises(AttributeError):
            d.faces = (4, 5, 6)  # type: ignore[misc]

    def test_too_few_faces(self) -> None:
        with pytest.raises(InvalidArgument):
            Die((1, 2))

    def test_non_integer_face(self) -> None:
        with pytest.raises(InvalidArgument):
            Die((1, 2, 3.5))  # type: ignore[arg-type]

    def test_face_index_bounds(self) -> None:
        d = Die((7, 8, 9))
        assert d.face(2) == 9
        with pytest.raises(InvalidArgument):
            d.face(3)


class TestParseDice:
    def test_valid(self) -> None:
        dice = parse_dice(["2,2,4,4,9,9", "6,8,1,1,8,6", "7,5,3,7,5,3"])
        assert [str(d) for d in dice] == ["[2,2,4,4,9,9]", "[6,8,1,1,8,6]", "[7,5,3,7,5,3]"]

    def test_whitespace_and_negatives(self) -> None:
        d = parse_die(" 1, -2,3 ,4,5,6")
        assert d.faces == (1, -2, 3, 4, 5, 6)

    def test_too_few_dice(self) -> None:
        with pytest.raises(InvalidArgument, match="At least 3 dice"):
            parse_dice(["1,2,3,4,5,6", "1,2,3,4,5,6"])

    def test_no_dice(self) -> None:
        with pytest.raises(InvalidArgument):
            parse_dice([])

    def test_too_few_faces_names_die(self) -> None:
        with pytest.raises(InvalidArgument, match="Die #2"):
            parse_dice(["1,2,3,4,5,6", "1,2,3", "1,2,3,4,5,6"])

    def test_non_integer_names_die(self) -> None:
        with pytest.raises(InvalidArgument, match="Die #3 contains a non-integer"):
            parse_dice(["1,2,3,4,5,6", "1,2,3,4,5,6", "1,2,x,4,5,6"])

    def test_mismatched_face_counts(self) -> None:
        with pytest.raises(InvalidArgument, match="same number of faces"):
            parse_dice(["1,2,3,4,5,6", "1,2,3,4,5,6,7", "1,2,3,4,5,6"])

    def test_more_than_six_faces_allowed(self) -> None:
        dice = parse_dice(["1,2,3,4,5,6,7,8"] * 3)
        assert all(d.face_count == 8 for d in dice)

    def test_custom_minimums(self) -> None:
        dice = parse_dice(["1,2,3", "4,5,6"], min_faces=3, min_dice=2)
        assert len(dice) == 2
