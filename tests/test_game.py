"""Unit tests for the tic-tac-toe engine."""

import logging

import pytest

from tictactoe.game import (
    EMPTY,
    Board,
    Game,
    GameStatus,
    Outcome,
    Player,
    WINNING_LINES,
)

DRAW_SEQUENCE = (0, 1, 2, 4, 3, 5, 7, 6, 8)


def _play(game, indices):
    result = None
    for index in indices:
        result = game.play_round(index)
    return result


def test_each_cell_accepts_exactly_one_mark():
    for index in range(9):
        board = Board()
        assert board.place_mark(index, "X") is True
        assert board.place_mark(index, "O") is False
        assert board.place_mark(index, "X") is False
        assert board.get_cells()[index] == "X"


def test_place_mark_rejects_out_of_range_without_mutation():
    board = Board()
    for index in (-1, 9, 100, -9):
        assert board.place_mark(index, "X") is False
    assert board.get_cells() == (EMPTY,) * 9


def test_place_mark_rejects_empty_mark():
    board = Board()
    assert board.place_mark(4, EMPTY) is False
    assert board.get_cells() == (EMPTY,) * 9


def test_reset_clears_any_board():
    board = Board()
    for index in range(9):
        board.place_mark(index, "X" if index % 2 else "O")
    board.reset()
    assert board.get_cells() == (EMPTY,) * 9


def test_get_cells_is_read_only_copy():
    board = Board()
    cells = board.get_cells()
    assert isinstance(cells, tuple)
    board.place_mark(0, "X")
    assert cells[0] == EMPTY
    assert board.get_cells()[0] == "X"


def test_board_requires_nine_cells():
    with pytest.raises(ValueError):
        Board(["X", "O"])


@pytest.mark.parametrize("line", WINNING_LINES)
def test_has_line_for_every_winning_triple(line):
    board = Board()
    for index in line:
        board.place_mark(index, "O")
    assert board.has_line("O")
    assert not board.has_line("X")


def test_new_game_defaults():
    game = Game()
    assert game.status is GameStatus.NOT_STARTED
    assert game.active_player == Player("Player 1", "X")
    assert game.is_over is False
    assert game.board.get_cells() == (EMPTY,) * 9


def test_draw_sequence_reports_tie():
    game = Game()
    game.start()
    results = [game.play_round(index) for index in DRAW_SEQUENCE]

    assert all(r.outcome is Outcome.CONTINUE for r in results[:-1])
    assert results[-1].outcome is Outcome.TIE
    assert results[-1].player is None
    assert game.is_over is True
    assert game.status is GameStatus.OVER
    assert game.board.get_cells() == ("X", "O", "X", "X", "O", "O", "O", "X", "X")


def test_top_row_win_for_first_player():
    game = Game()
    game.start()
    result = _play(game, (0, 3, 1, 4, 2))

    assert result.outcome is Outcome.WIN
    assert result.player == game.players[0]
    assert game.is_over is True
    assert game.active_player == game.players[0]
    assert result.message == "Player 1 (X) wins!"


def test_win_on_last_cell_is_not_a_tie():
    game = Game()
    game.start()
    # The ninth move fills the board and completes the 0-4-8 diagonal.
    result = _play(game, (0, 1, 2, 3, 4, 5, 7, 6, 8))

    assert game.board.is_full()
    assert result.outcome is Outcome.WIN
    assert result.player.mark == "X"


def test_continue_reports_next_player():
    game = Game()
    game.start()
    result = game.play_round(4)
    assert result.outcome is Outcome.CONTINUE
    assert result.player == game.players[1]
    assert game.active_player == game.players[1]
    assert result.message == "Turn: Player 2 (O)"


def test_occupied_cell_is_invalid_and_keeps_turn():
    game = Game()
    game.start()
    game.play_round(0)
    before = game.board.get_cells()

    result = game.play_round(0)

    assert result.outcome is Outcome.INVALID
    assert result.player is None
    assert game.board.get_cells() == before
    assert game.active_player == game.players[1]


@pytest.mark.parametrize("index", [-1, 9])
def test_out_of_range_rejected_in_any_state(index):
    game = Game()
    assert game.play_round(index).outcome is Outcome.INVALID

    game.start()
    assert game.play_round(index).outcome is Outcome.INVALID
    assert game.board.get_cells() == (EMPTY,) * 9

    _play(game, (0, 3, 1, 4, 2))
    before = game.board.get_cells()
    assert game.play_round(index).outcome is Outcome.GAME_OVER
    assert game.board.get_cells() == before


def test_rounds_after_game_over_are_noops():
    game = Game()
    game.start()
    _play(game, (0, 3, 1, 4, 2))
    cells = game.board.get_cells()
    winner_result = game.last_result

    result = game.play_round(8)

    assert result.outcome is Outcome.GAME_OVER
    assert game.board.get_cells() == cells
    assert game.active_player == game.players[0]
    assert game.last_result == winner_result


def test_start_mid_game_discards_progress():
    game = Game()
    game.start()
    _play(game, (0, 4, 8))
    game.start()

    assert game.board.get_cells() == (EMPTY,) * 9
    assert game.active_player == game.players[0]
    assert game.is_over is False
    assert game.status is GameStatus.IN_PROGRESS
    assert game.last_result is None


def test_start_after_win_resets_to_first_player():
    game = Game()
    game.start()
    _play(game, (3, 0, 4, 1, 8, 2))
    assert game.active_player == game.players[1]
    game.start()
    assert game.active_player == game.players[0]
    assert game.play_round(0).outcome is Outcome.CONTINUE


def test_custom_players():
    alice = Player("Alice", "A")
    bob = Player("Bob", "B")
    game = Game(alice, bob)
    game.start()
    game.play_round(0)
    assert game.board.get_cells()[0] == "A"
    assert game.active_player is bob


@pytest.mark.parametrize(
    "player_a, player_b",
    [
        (Player("a", "X"), Player("b", "X")),
        (Player("a", ""), Player("b", "O")),
        (Player("a", "XO"), Player("b", "O")),
    ],
)
def test_rejects_bad_player_marks(player_a, player_b):
    with pytest.raises(ValueError):
        Game(player_a, player_b)


def test_snapshot_reports_winner_and_draw():
    game = Game()
    game.start()
    _play(game, DRAW_SEQUENCE)
    snapshot = game.snapshot()
    assert snapshot.drawn is True
    assert snapshot.winner is None
    assert snapshot.is_over is True
    assert game.status_message() == "It's a tie!"


def test_game_logs_outcomes(caplog):
    game = Game()
    with caplog.at_level(logging.INFO, logger="tictactoe.game"):
        game.start()
        _play(game, (0, 3, 1, 4, 2))
    assert "Game started" in caplog.text
    assert "Player 1 (X) wins!" in caplog.text


def test_games_do_not_share_state():
    first = Game()
    second = Game()
    first.start()
    second.start()
    first.play_round(0)
    assert second.board.get_cells() == (EMPTY,) * 9
    assert second.active_player == second.players[0]
