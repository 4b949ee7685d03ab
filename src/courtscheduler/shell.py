"""Interactive shell for the court scheduler.

Reads commands with autocompletion and history and dispatches them to the
same sub-command handlers the command line uses.
"""

# Court Scheduler
# Copyright (C) 2025  Court Scheduler developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import shlex
from typing import Callable, Dict, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from courtscheduler.cli import (
    create_generate_parser,
    create_pairings_parser,
    create_validate_parser,
    run_command,
)
from courtscheduler.constants import STRATEGIES
from courtscheduler.utils import setup_logger

logger = setup_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


# Command definitions with their options
COMMANDS = {
    "generate": {
        "description": "Generate a season schedule",
        "options": {
            "--strategy": f"Scheduling strategy ({'/'.join(STRATEGIES)})",
            "--participants": "Roster size, even (default: 16)",
            "--weeks": "Number of weeks (default: 7)",
            "--group": "Court group such as 0,1,2,3 or 4-7 (repeatable)",
            "--allow-overlap": "Allow a participant in several court groups",
            "--keep-baseline-pairs": "Do not block court baseline pairs",
            "--config": "Season configuration file (JSON)",
            "--seed": "Random seed for reproducibility",
            "--attempts": "Fresh attempts before giving up",
            "--output": "Save the schedule as JSON",
            "--matrix": "Also print the opponent matrix",
            "--verbose": "Enable debug logging",
        },
    },
    "pairings": {
        "description": "List the pairings of a court group",
        "options": {"--group": "Court group such as 0,1,2,3"},
    },
    "validate": {
        "description": "Validate a saved schedule",
        "options": {
            "--file": "Saved schedule (JSON)",
            "--config": "Season configuration to validate against",
        },
    },
    "help": {"description": "Show help for a command", "options": {}},
    "exit": {"description": "Exit the interactive mode", "options": {}},
}

PARSERS: Dict[str, Callable] = {
    "generate": create_generate_parser,
    "pairings": create_pairings_parser,
    "validate": create_validate_parser,
}


def print_banner():
    """Print the application banner."""
    banner = f"""
{Colors.OKBLUE}+---------------------------------------------------------------+
|                                                               |
|                      COURT SCHEDULER                          |
|                                                               |
|            [Season schedules without repeat matches]          |
|                                                               |
+---------------------------------------------------------------+{Colors.ENDC}

Type {Colors.BOLD}/help{Colors.ENDC} to see all available commands
Type {Colors.BOLD}exit{Colors.ENDC} or {Colors.BOLD}quit{Colors.ENDC} to leave interactive mode
"""
    print(banner)


def print_commands_list():
    """Print list of all available commands."""
    print(f"\n{Colors.BOLD}Available Commands:{Colors.ENDC}\n")
    for cmd, info in COMMANDS.items():
        print(f"  {Colors.OKGREEN}{cmd:15}{Colors.ENDC} - {info['description']}")
    print()


def print_command_help(command: str):
    """Print detailed help for a specific command."""
    if command not in COMMANDS:
        print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        print_commands_list()
        return

    cmd_info = COMMANDS[command]
    print(f"\n{Colors.BOLD}{Colors.OKBLUE}Command: {command}{Colors.ENDC}")
    print(f"{Colors.BOLD}Description:{Colors.ENDC} {cmd_info['description']}\n")

    if cmd_info["options"]:
        print(f"{Colors.BOLD}Options:{Colors.ENDC}")
        for option, description in cmd_info["options"].items():
            print(f"  {Colors.OKCYAN}{option:24}{Colors.ENDC} {description}")
    print()


def create_completer() -> NestedCompleter:
    """Create autocomplete completer for interactive mode."""
    # Both "/command" and "command" are accepted
    completions = {}
    for cmd, info in COMMANDS.items():
        options_completer = (
            WordCompleter(list(info["options"].keys())) if info["options"] else None
        )
        completions[cmd] = options_completer
        completions[f"/{cmd}"] = options_completer

    completions["/list"] = None
    return NestedCompleter.from_nested_dict(completions)


def execute_line(line: str) -> Optional[int]:
    """Run one shell line.

    Returns:
        The command's exit code, or None for meta commands and input errors
    """
    try:
        parts: List[str] = shlex.split(line)
    except ValueError as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        return None
    if not parts:
        return None

    command = parts[0].lstrip("/")
    if command in ("help", "list", "?"):
        if len(parts) > 1:
            print_command_help(parts[1].lstrip("/"))
        else:
            print_commands_list()
        return None

    if command not in PARSERS:
        print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        print(f"Type {Colors.BOLD}/help{Colors.ENDC} to see available commands")
        return None

    parser = PARSERS[command]()
    try:
        args = parser.parse_args(parts[1:])
    except SystemExit:
        # argparse exits on bad input or --help
        return None
    return run_command(args)


def run_interactive_mode() -> int:
    """Run in interactive mode with autocomplete."""
    print_banner()

    style = Style.from_dict(
        {
            "prompt": "#00aa00 bold",
        }
    )
    session = PromptSession(
        completer=create_completer(),
        history=InMemoryHistory(),
        style=style,
    )

    while True:
        try:
            user_input = session.prompt("court-scheduler> ").strip()
            if not user_input:
                continue

            if user_input in ("exit", "quit", "q", "/exit"):
                print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
                break

            exit_code = execute_line(user_input)
            if exit_code:
                print(
                    f"{Colors.WARNING}Command finished with exit code "
                    f"{exit_code}{Colors.ENDC}"
                )

        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
        except EOFError:
            print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
            break

    return 0
