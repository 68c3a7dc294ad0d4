"""
Queue Minion CLI - Entry point with IPC support

Without a subcommand the interactive shell starts. With one, the command
is sent to the running shell over its control socket.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from queue_minion import ipc


def send_ipc_command(command: str, args: List[str]) -> int:
    """
    Send a command to running Queue Minion instance via IPC.

    Args:
        command: Command name
        args: Command arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    success, message = ipc.send_command(command, args)

    if success:
        print(message)
        return 0
    else:
        print(message, file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the queue-minion command."""
    parser = argparse.ArgumentParser(
        prog='queue-minion',
        description="Queue Minion - Named Play Queues",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '--config',
        type=Path,
        help='Path to config.toml (interactive mode only)'
    )

    subparsers = parser.add_subparsers(dest='subcommand', help='Available commands')

    create_parser = subparsers.add_parser('create-queue', help='Create an empty queue')
    create_parser.add_argument('name', help='Queue name')

    add_parser = subparsers.add_parser('add-files', help='Add audio files to a queue')
    add_parser.add_argument('queue', help='Queue name')
    add_parser.add_argument('paths', nargs='+', help='Files or directories')

    play_parser = subparsers.add_parser('play', help='Play a queue')
    play_parser.add_argument('queue', help='Queue name')
    play_parser.add_argument('track', nargs='?', help='Track label or position (default: first)')

    next_parser = subparsers.add_parser('next', help='Play the next track of a queue')
    next_parser.add_argument('queue', help='Queue name')

    shuffle_parser = subparsers.add_parser('shuffle', help='Shuffle a queue')
    shuffle_parser.add_argument('queue', help='Queue name')

    transpose_parser = subparsers.add_parser('transpose', help='Move a track by one position')
    transpose_parser.add_argument('queue', help='Queue name')
    transpose_parser.add_argument('track', help='Track label or position')
    transpose_parser.add_argument('direction', choices=['forward', 'backward'])

    discard_parser = subparsers.add_parser('discard', help='Discard a queue')
    discard_parser.add_argument('queue', help='Queue name')

    subparsers.add_parser('list', help='List queues')

    show_parser = subparsers.add_parser('show', help='Show the tracks of a queue')
    show_parser.add_argument('queue', help='Queue name')

    return parser


def ipc_arguments(args: argparse.Namespace) -> List[str]:
    """Flatten parsed subcommand arguments into the IPC argument list."""
    if args.subcommand == 'create-queue':
        return [args.name]

    if args.subcommand == 'add-files':
        # The shell may run in another directory
        return [args.queue] + [os.path.abspath(path) for path in args.paths]

    if args.subcommand == 'play':
        return [args.queue] + ([args.track] if args.track else [])

    if args.subcommand == 'transpose':
        return [args.queue, args.track, args.direction]

    if args.subcommand == 'list':
        return []

    return [args.queue]


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the queue-minion command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.subcommand:
        sys.exit(send_ipc_command(args.subcommand, ipc_arguments(args)))

    # No subcommand - start interactive mode
    from .main import interactive_mode
    interactive_mode(args.config)


if __name__ == "__main__":
    main()
