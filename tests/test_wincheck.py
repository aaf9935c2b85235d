from pentago_duel.board import Board, Player, Outcome, check_winner


def filled_without_five() -> Board:
    b = Board()
    for y in range(6):
        for x in range(6):
            b.place(x, y, Player.WHITE if (x + 2 * y) % 4 < 2 else Player.BLACK)
    return b


def test_check_five_horizontal_black():
    b = Board()
    for x in range(5):
        b.place(x, 0, Player.BLACK)
    assert b.check_five(Player.BLACK)
    assert not b.check_five(Player.WHITE)
    assert check_winner(b) == Outcome.BLACK_WINS


def test_check_five_vertical_white():
    b = Board()
    for y in range(1, 6):
        b.place(4, y, Player.WHITE)
    assert b.check_five(Player.WHITE)
    assert check_winner(b) == Outcome.WHITE_WINS


def test_check_five_diagonal_black():
    b = Board()
    for k in range(5):
        b.place(k + 1, k + 1, Player.BLACK)
    assert check_winner(b) == Outcome.BLACK_WINS


def test_check_five_anti_diagonal_white():
    b = Board()
    for k in range(5):
        b.place(4 - k, 1 + k, Player.WHITE)
    assert check_winner(b) == Outcome.WHITE_WINS


def test_six_in_a_row_counts():
    b = Board()
    for x in range(6):
        b.place(x, 3, Player.WHITE)
    assert check_winner(b) == Outcome.WHITE_WINS


def test_no_false_positive_on_four():
    b = Board()
    for x in range(4):
        b.place(x, 5, Player.BLACK)
    assert not b.check_five(Player.BLACK)
    assert check_winner(b) == Outcome.ONGOING


def test_broken_line_is_not_five():
    b = Board()
    for x in (0, 1, 2, 4, 5):
        b.place(x, 2, Player.WHITE)
    b.place(3, 2, Player.BLACK)
    assert check_winner(b) == Outcome.ONGOING


def test_empty_board_is_ongoing():
    assert check_winner(Board()) == Outcome.ONGOING


def test_full_board_without_five_is_draw():
    b = filled_without_five()
    assert b.full()
    assert check_winner(b) == Outcome.DRAW


def test_both_colors_five_is_draw():
    b = Board()
    for x in range(5):
        b.place(x, 0, Player.WHITE)
        b.place(x, 1, Player.BLACK)
    assert check_winner(b) == Outcome.DRAW


def test_color_swap_symmetry():
    swaps = {
        Outcome.WHITE_WINS: Outcome.BLACK_WINS,
        Outcome.BLACK_WINS: Outcome.WHITE_WINS,
        Outcome.DRAW: Outcome.DRAW,
        Outcome.ONGOING: Outcome.ONGOING,
    }
    boards = [Board(), filled_without_five()]
    b = Board()
    for y in range(5):
        b.place(2, y, Player.WHITE)
    boards.append(b)
    b = Board()
    for x in range(5):
        b.place(x, 0, Player.WHITE)
        b.place(x, 5, Player.BLACK)
    boards.append(b)
    b = Board()
    for k in range(4):
        b.place(k, k, Player.BLACK)
    boards.append(b)
    for b in boards:
        assert check_winner(b.swapped_colors()) == swaps[check_winner(b)]
