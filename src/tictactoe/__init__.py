"""Tic-tac-toe package exposing the game engine and the web application."""

from .game import Board, Game, GameStatus, Outcome, Player, RoundResult
from .ui import app

__all__ = ["Board", "Game", "GameStatus", "Outcome", "Player", "RoundResult", "app"]
