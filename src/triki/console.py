"""Text front end: menu loop, row/column prompts and an ASCII board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
import random
import time

from .ai import Difficulty
from .board import InvalidMove, to_row_col
from .session import GameMode, GameSession, SessionState

AI_THINK_DELAY = 0.5

DIFFICULTY_NAMES = {
    Difficulty.EASY: "Fácil",
    Difficulty.MEDIUM: "Medio",
    Difficulty.HARD: "Difícil",
}
DIFFICULTY_CHOICES = {"1": Difficulty.EASY, "2": Difficulty.MEDIUM, "3": Difficulty.HARD}

INVALID_MOVE_TEXT = (
    "Movimiento inválido. Asegúrate de ingresar dos números entre 0 y 2, "
    "y que la casilla esté vacía."
)


def parse_row_col(text: str) -> Optional[Tuple[int, int]]:
    parts = text.split()
    if len(parts) != 2:
        return None
    try:
        row, column = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    return row, column


@dataclass
class ConsoleApp:
    """Drives a GameSession from stdin/stdout.

    ``read``, ``write`` and ``sleep`` are swappable so the loop can be
    scripted in tests.
    """

    read: Callable[[str], str] = input
    write: Callable[[str], None] = print
    sleep: Callable[[float], None] = time.sleep
    rng: Optional[random.Random] = field(default=None, repr=False)

    def run(self) -> None:
        while True:
            self._show_menu()
            option = self.read("\nOpción: ").strip()
            if option == "0":
                self.write("\n¡Gracias por jugar! 👋")
                return
            if option == "1":
                self.play(GameMode.TWO_HUMAN)
            elif option == "2":
                self.play(GameMode.HUMAN_VS_AI, self._ask_difficulty())
            else:
                self.write("Opción inválida. Por favor, selecciona 1, 2 o 0.")

            self.read("\n¿Quieres jugar otra vez? (Presiona Enter para continuar)")

    def play(
        self, mode: GameMode, difficulty: Optional[Difficulty] = None
    ) -> GameSession:
        session = GameSession(auto_play_ai=False, rng=self.rng)
        session.select_mode(mode)
        if mode is GameMode.HUMAN_VS_AI:
            session.select_difficulty(difficulty or Difficulty.MEDIUM)

        self.write("¡Bienvenido a Triki (Tic-Tac-Toe)!")
        if mode is GameMode.TWO_HUMAN:
            self.write("Modo: Dos Jugadores")
        else:
            self.write("Modo: Jugador vs Computadora")
            self.write(f"Dificultad: {DIFFICULTY_NAMES[session.difficulty]}")

        while session.state is SessionState.PLAYING:
            self._show_board(session)
            if session.ai_to_move:
                self._ai_move(session)
            else:
                self._human_move(session)

        self._show_board(session)
        self._announce(session)
        return session

    # ---- turns ----

    def _human_move(self, session: GameSession) -> None:
        mark = session.current_player.value
        while True:
            text = self.read(
                f"Jugador {mark}, ingresa tu movimiento (fila columna, ej: 0 1): "
            )
            move = parse_row_col(text)
            if move is not None:
                try:
                    session.submit_human_move(move)
                    return
                except InvalidMove:
                    pass
            self.write(INVALID_MOVE_TEXT)

    def _ai_move(self, session: GameSession) -> None:
        self.write("La computadora está pensando... 🤔")
        self.sleep(AI_THINK_DELAY)
        row, column = to_row_col(session.play_ai_turn())
        self.write(f"La computadora jugó en: {row} {column}")

    # ---- output ----

    def _show_menu(self) -> None:
        self.write("\n" + "=" * 50)
        self.write("🎮  TRIKI - TIC-TAC-TOE  🎮".center(50))
        self.write("=" * 50)
        self.write("\nSelecciona el modo de juego:")
        self.write("1. Dos Jugadores (Humano vs Humano)")
        self.write("2. Jugador vs Computadora")
        self.write("0. Salir")

    def _ask_difficulty(self) -> Difficulty:
        self.write("\nSelecciona la dificultad:")
        self.write("1. Fácil (Movimientos aleatorios)")
        self.write("2. Medio (Bloquea y ataca)")
        self.write("3. Difícil (IA invencible con Minimax)")
        option = self.read("\nOpción: ").strip()
        return DIFFICULTY_CHOICES.get(option, Difficulty.MEDIUM)

    def _show_board(self, session: GameSession) -> None:
        self.write("\n" + session.board.render() + "\n")

    def _announce(self, session: GameSession) -> None:
        outcome = session.outcome
        if outcome.result == "draw":
            self.write("¡Es un empate! 🤝")
        elif session.mode is GameMode.HUMAN_VS_AI:
            if outcome.winner is session.ai_mark:
                self.write("¡La computadora ha ganado! 🤖")
            else:
                self.write("¡Felicidades! ¡Has ganado! 🎉")
        else:
            self.write(f"¡El jugador {outcome.winner.value} ha ganado! 🎉")
