"""
history.py - Finished game records for the Connect Four command

This module stores one record per finished chat game in a JSON file and
answers per-player questions about them. Reads and writes go through a file
lock so several bot processes can share one history file.
"""

import datetime
import json
import os
import shutil
from typing import Any, Dict, List, Optional

import filelock

from c4bot.debug import debug
from c4bot.utils import GameStatus, Player

# Constants
MAX_RECORDS = 1000  # Maximum number of finished games to keep

REASONS = ('won', 'draw', 'pruned', 'closed')


# File utility functions
def _load_records(file_path: str) -> List[Dict]:
    """Read the records from a JSON file. The caller holds the file lock."""
    if not os.path.exists(file_path):
        return []
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except ValueError as e:  # JSONDecodeError and UnicodeDecodeError
        debug.error(f"Error decoding JSON from {file_path}: {e}", "data")
        return []

    if not isinstance(records, list):
        debug.error(f"Expected a list of records in {file_path}, ignoring its contents", "data")
        return []
    return records


def _dump_records(file_path: str, data: Any) -> bool:
    """Atomically replace a JSON file. The caller holds the file lock."""
    try:
        temp_file = f"{file_path}.tmp"
        with open(temp_file, 'w') as f:
            json.dump(data, f, indent=2)

        shutil.move(temp_file, file_path)
        return True
    except OSError as e:
        debug.error(f"Error writing to {file_path}: {e}", "data")
        return False


def safe_read_json(file_path: str) -> List[Dict]:
    """
    Safely read a JSON file with file locking.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON data (empty list if file doesn't exist)
    """
    if not os.path.exists(file_path):
        return []

    with filelock.FileLock(f"{file_path}.lock"):
        return _load_records(file_path)


def _seat_to_dict(seat) -> Optional[Dict[str, Any]]:
    if seat is None:
        return None
    user_id, name = seat
    return {"id": user_id, "name": name}


def _player_key(player: Optional[Player]) -> Optional[str]:
    return player.name.lower() if player is not None else None


def build_record(session, reason: str) -> Dict[str, Any]:
    """
    Build the history record for a finished game session.

    Args:
        session: The GameSession that ended
        reason: Why it ended, one of REASONS

    Returns:
        JSON serializable record
    """
    if reason not in REASONS:
        raise ValueError(f"Unknown reason '{reason}'")

    game = session.game
    return {
        "game_id": session.game_id,
        "mode": session.mode_label,
        "width": game.board.width,
        "height": game.board.height,
        "players": {
            "red": _seat_to_dict(session.seats.get(Player.RED)),
            "blue": _seat_to_dict(session.seats.get(Player.BLUE)),
        },
        "winner": _player_key(game.get_winner()),
        "reason": reason,
        "moves": game.moves,
        "started_at": session.started_at.isoformat(),
        "ended_at": datetime.datetime.now().isoformat(),
    }


def end_reason(game) -> str:
    """Classify how a finished game ended."""
    if game.state == GameStatus.WON:
        return 'won'
    if game.board.is_full():
        return 'draw'
    return 'closed'


def record_game(file_path: str, record: Dict[str, Any]) -> bool:
    """
    Append a finished game to the history file.

    Args:
        file_path: Path to the history JSON file
        record: Record from build_record

    Returns:
        True if successful, False otherwise
    """
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    debug.debug(f"Recording game {record.get('game_id')} ({record.get('reason')})", "data")

    # One lock across read and write: finished games may be recorded concurrently
    with filelock.FileLock(f"{file_path}.lock"):
        records = _load_records(file_path)
        records.append(record)
        if len(records) > MAX_RECORDS:
            records = records[-MAX_RECORDS:]
        return _dump_records(file_path, records)


def get_player_stats(file_path: str, user_id: int) -> Dict[str, int]:
    """
    Summarize a user's finished games.

    Args:
        file_path: Path to the history JSON file
        user_id: Chat user id

    Returns:
        Dictionary with played, wins, losses and draws
    """
    stats = {"played": 0, "wins": 0, "losses": 0, "draws": 0}

    for record in safe_read_json(file_path):
        if not isinstance(record, dict):
            continue
        seat_color = None
        for color, seat in record.get("players", {}).items():
            if seat and seat.get("id") == user_id:
                seat_color = color
                break
        if seat_color is None:
            continue

        stats["played"] += 1
        winner = record.get("winner")
        if winner is None:
            stats["draws"] += 1
        elif winner == seat_color:
            stats["wins"] += 1
        else:
            stats["losses"] += 1

    return stats
