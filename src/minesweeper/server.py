"""Flask server for Minesweeper game."""
import logging
import os
import random
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS

from .board import BOARD_SIZES, DEFAULT_SIZE, ConfigurationError
from .game import GameHost
from .scores import (
    HighScores,
    LocalStore,
    format_time,
    scores_path_from_env,
    size_label,
)
from .session import GameSession

logger = logging.getLogger(__name__)


def serialize_game_state(session: GameSession) -> Dict[str, Any]:
    """Convert game state to JSON-serializable format."""
    return {
        'size': session.size_key,
        'rows': session.config.rows,
        'cols': session.config.cols,
        'mines': session.config.mines,
        'status': session.status.value,
        'flagsPlaced': session.flags_placed,
        'minesRemaining': session.mines_remaining,
        'elapsedSeconds': session.elapsed_seconds,
        'timerRunning': session.timer_running,
        'board': session.board.get_observation().tolist(),
    }


def _host() -> GameHost:
    return current_app.extensions['minesweeper']


def _read_cell() -> Optional[Tuple[int, int]]:
    """Extract (row, col) from the JSON body, or None if malformed."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    row, col = data.get('row'), data.get('col')
    for value in (row, col):
        if isinstance(value, bool) or not isinstance(value, int):
            return None
    return row, col


def _game_response(session: GameSession):
    return jsonify({'gameState': serialize_game_state(session)})


def create_app(
    scores_path: Optional[str] = None,
    rng: Optional[random.Random] = None,
    clock: Optional[Callable[[], float]] = None,
) -> Flask:
    """
    Build the Flask application.

    Args:
        scores_path: JSON file holding high scores.
        rng: Random source for mine placement.
        clock: Monotonic clock in seconds driving the game timer.
    """
    app = Flask(__name__)
    CORS(app)

    store = LocalStore(scores_path or scores_path_from_env())
    app.extensions['minesweeper'] = GameHost(HighScores(store), rng=rng, clock=clock)

    @app.route('/api/game', methods=['GET'])
    def get_game_state():
        """Get game state."""
        return _game_response(_host().current())

    @app.route('/api/game/reveal', methods=['POST'])
    def reveal_cell():
        """Reveal a cell."""
        cell = _read_cell()
        if cell is None:
            return jsonify({'error': 'Invalid move request'}), 400
        return _game_response(_host().reveal(*cell))

    @app.route('/api/game/flag', methods=['POST'])
    def toggle_flag():
        """Toggle a flag."""
        cell = _read_cell()
        if cell is None:
            return jsonify({'error': 'Invalid move request'}), 400
        return _game_response(_host().toggle_flag(*cell))

    @app.route('/api/game/reset', methods=['POST'])
    def reset():
        """Start a new game, optionally on another board size."""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({'error': 'Invalid reset request'}), 400
        size = data.get('size')
        if size is not None and not isinstance(size, str):
            return jsonify({'error': 'Invalid reset request'}), 400
        try:
            session = _host().reset(size)
        except ConfigurationError as error:
            return jsonify({'error': str(error)}), 400
        return _game_response(session)

    @app.route('/api/sizes', methods=['GET'])
    def list_sizes():
        """Board sizes a game can be played on."""
        return jsonify({
            'sizes': {
                key: {
                    'label': size_label(key),
                    'rows': config.rows,
                    'cols': config.cols,
                    'mines': config.mines,
                }
                for key, config in BOARD_SIZES.items()
            },
            'default': DEFAULT_SIZE,
        })

    @app.route('/api/highscores', methods=['GET'])
    def high_scores():
        """Read-only high-score table."""
        table = _host().scores.load_scores()
        return jsonify({
            'highScores': {
                key: {
                    'label': size_label(key),
                    'scores': [
                        dict(entry.to_dict(), rank=rank,
                             formatted=format_time(entry.elapsed_seconds))
                        for rank, entry in enumerate(entries, start=1)
                    ],
                }
                for key, entries in table.items()
            }
        })

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'OK',
            'timestamp': datetime.now().isoformat()
        })

    return app


def main(
    host: Optional[str] = None,
    port: Optional[int] = None,
    scores_path: Optional[str] = None,
) -> None:
    """Start the Flask server."""
    logging.basicConfig(level=logging.INFO)
    host = host or os.getenv("MINESWEEPER_HOST", "127.0.0.1")
    port = port or int(os.getenv("MINESWEEPER_PORT", 3000))

    app = create_app(scores_path)
    logger.info("Minesweeper server running on http://%s:%d", host, port)
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    main()
