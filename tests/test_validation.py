import pytest

from lightsmatrix.board import InvalidBoardError
from lightsmatrix.validation import validate_payload


def test_accepts_both_payload_shapes():
    board = [[0, 1, 0], [1, 1, 1]]
    a = validate_payload({"rows": 2, "cols": 3, "board": board})
    b = validate_payload(board)
    assert a == b
    assert a.to_list() == board


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({}, "Invalid board format"),
        ([], "Invalid board format"),
        ({"rows": 2.0, "cols": 2, "board": [[0, 0], [0, 0]]}, "must be integers"),
        ({"rows": 0, "cols": 2, "board": []}, "positive"),
        ({"rows": 31, "cols": 2, "board": []}, "too large"),
        ({"rows": 2, "cols": 2, "board": [[0, 0]]}, "correct number of rows"),
        ({"rows": 2, "cols": 2, "board": [[0, 0], [0]]}, "Row 1"),
        ({"rows": 1, "cols": 2, "board": [[0, 2]]}, "[0][1]"),
        ({"rows": 1, "cols": 2, "board": [[0, True]]}, "[0][1]"),
        ([[0, 1], [1]], "Row 1"),
    ],
)
def test_rejections(payload, message):
    with pytest.raises(InvalidBoardError) as exc:
        validate_payload(payload)
    assert message in str(exc.value)


def test_custom_max_dimension():
    with pytest.raises(InvalidBoardError):
        validate_payload([[0] * 6], max_dimension=5)
