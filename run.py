#!/usr/bin/env python3
"""
run.py - Main entry point for the c4bot Connect Four chat bot
"""

import argparse
import os
import sys

# Add the project root to Python path to ensure imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from c4bot.ai.players import BOT_KINDS
from c4bot.config import ConfigError
from c4bot.debug import debug, DebugLevel

# --- Utility Functions ---

def positive_int(value):
    """argparse type for board dimensions."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number

def configure_debug(args):
    """Configure debug level based on args.debug or args.debug_level."""
    if args.debug:
        debug.configure(level=DebugLevel.DEBUG)
    elif args.debug_level:
        debug.set_from_string(args.debug_level)

def handle_bot_command(args):
    """Serve the Connect Four command in chat."""
    from c4bot.interfaces.telegram_bot import run_bot

    # An explicit command-line level overrides the config file's
    level = 'debug' if args.debug else args.debug_level
    try:
        run_bot(args.config, log_level=level)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

def handle_play_command(args):
    """Play a game in the terminal."""
    from c4bot.interfaces.cli import SimpleCLI

    cli = SimpleCLI(ai=args.ai, width=args.width, height=args.height, depth=args.depth)
    try:
        cli.play_game()
    except (KeyboardInterrupt, EOFError):
        print("\nQuitting game.")

# --- Main Entry Point ---

def main():
    """Main entry point for c4bot."""
    parser = argparse.ArgumentParser(
        description='Connect Four chat bot',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
    Examples:

    CHAT BOT:
    ---------
    # Run the bot (token from TELEGRAM_BOT_TOKEN or a file named 'secret')
    python run.py bot

    # Run the bot with a specific config file and debug logging
    python run.py bot --config config/config.yaml --debug

    TERMINAL:
    ---------
    # Play Connect Four against the random bot
    python run.py play

    # Play against the minimax bot, searching 6 moves ahead
    python run.py play --ai minimax --depth 6

    # Two human players on a 9x7 board
    python run.py play --ai none --width 9 --height 7
    """
    )

    subparsers = parser.add_subparsers(dest='component', help='Component to run')

    bot_parser = subparsers.add_parser('bot',
        help='Run the chat bot',
        description='Connect to the chat platform and host games')
    bot_parser.add_argument('--config',
        type=str,
        default=None,
        help='Path to config YAML (default: config/config.yaml or config.yaml if present)')

    play_parser = subparsers.add_parser('play',
        help='Play in the terminal',
        description='Play Connect Four against a bot or another person')
    play_parser.add_argument('--ai',
        choices=list(BOT_KINDS) + ['none'],
        default='random',
        help='AI opponent type: random, minimax, or none (two human players)')
    play_parser.add_argument('--width', type=positive_int, default=7, help='Board width (default: 7)')
    play_parser.add_argument('--height', type=positive_int, default=6, help='Board height (default: 6)')
    play_parser.add_argument('--depth', type=positive_int, default=4,
        help='Search depth for the minimax AI (default: 4)')

    for sub in (bot_parser, play_parser):
        sub.add_argument('--debug',
            action='store_true',
            help='Enable debug mode (equivalent to --debug_level debug)')
        sub.add_argument('--debug_level',
            choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
            default=None,
            help='Set debug level: none (silent), error, warning, info, debug, trace '
                 '(default: info, or logging.level from the bot config)')

    args = parser.parse_args()
    if args.component is None:
        parser.print_help()
        return

    configure_debug(args)
    if args.component == 'bot':
        handle_bot_command(args)
    elif args.component == 'play':
        handle_play_command(args)

if __name__ == "__main__":
    main()
