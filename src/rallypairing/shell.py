"""Interactive shell for Rally Pairing.

Runs the ``plan``, ``simulate`` and ``rate`` commands from a prompt with
command and option completion.
"""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
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

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from rallypairing.cli import (
    Colors,
    create_plan_parser,
    create_rate_parser,
    create_simulate_parser,
    run_plan_command,
    run_rate_command,
    run_simulate_command,
)
from rallypairing.exceptions import RallyPairingException
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


# Command definitions with their options
COMMANDS = {
    "plan": {
        "description": "Show the round plan for a field size",
        "options": {
            "--players": "Number of players (required)",
            "--three-round-cap": "Collapse long plans to prelim, eight and final",
            "--config": "Schedule preferences JSON file",
        },
    },
    "simulate": {
        "description": "Simulate a complete tournament",
        "options": {
            "--players": "Number of players (default: 16)",
            "--seed": "Random seed for reproducibility",
            "--format": "Wave format (adaptive/gated)",
            "--courts": "Courts available",
            "--three-round-cap": "Collapse long plans",
            "--distribution": "Skill distribution (uniform/normal/skewed/club)",
            "--pattern": "Score pattern (realistic/close/blowout/random)",
            "--top": "Standings rows to show (default: 8)",
            "--config": "Schedule preferences JSON file",
            "--output": "Output file path",
        },
    },
    "rate": {
        "description": "Rating change for one match: rate R1 R2 R3 R4 --score A B",
        "options": {
            "--score": "Points of team A and team B (required)",
            "--round": "Round index (default: 1)",
            "--wave": "Wave index",
            "--games": "Average games played (default: 1)",
        },
    },
    "help": {
        "description": "Show help for specific command",
        "options": {
            "<command>": "Command name to get help for",
        },
    },
    "exit": {"description": "Exit the interactive mode", "options": {}},
}

RUNNERS = {
    "plan": (create_plan_parser, run_plan_command),
    "simulate": (create_simulate_parser, run_simulate_command),
    "rate": (create_rate_parser, run_rate_command),
}


def print_banner():
    """Print the application banner."""
    banner = f"""
{Colors.OKBLUE}╔═══════════════════════════════════════════════════════════════╗
║                                                               ║
║                      RALLY PAIRING SHELL                      ║
║                                                               ║
╚═══════════════════════════════════════════════════════════════╝{Colors.ENDC}

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
            print(f"  {Colors.OKCYAN}{option:20}{Colors.ENDC} {description}")
    print()


def create_completer() -> NestedCompleter:
    """Create autocomplete completer for interactive mode."""
    # Support both "/command" and "command" formats
    completions = {}
    for cmd, info in COMMANDS.items():
        options_completer = (
            WordCompleter(list(info["options"].keys())) if info["options"] else None
        )
        completions[cmd] = options_completer
        completions[f"/{cmd}"] = options_completer

    completions["/help"] = None
    completions["/list"] = None

    return NestedCompleter.from_nested_dict(completions)


def execute_line(user_input: str) -> bool:
    """Run one line of shell input.

    Returns:
        False when the shell should exit, True otherwise
    """
    user_input = user_input.strip()
    if not user_input:
        return True

    if user_input in ["exit", "quit", "q", "/exit"]:
        print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
        return False

    if user_input in ["/help", "help", "?", "/list"]:
        print_commands_list()
        return True

    try:
        parts = shlex.split(user_input)
    except ValueError as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        return True
    command = parts[0].lstrip("/")
    args_list = parts[1:]

    if command == "help":
        if args_list:
            print_command_help(args_list[0].lstrip("/"))
        else:
            print_commands_list()
        return True

    if command not in RUNNERS:
        print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        print(f"Type {Colors.BOLD}/help{Colors.ENDC} to see available commands")
        return True

    create_parser, run = RUNNERS[command]
    try:
        args = create_parser().parse_args(args_list)
        run(args)
    except SystemExit:
        # argparse exits on bad input
        pass
    except RallyPairingException as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
    except Exception as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        logger.exception("Command execution failed")
    return True


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
            if not execute_line(session.prompt("rally> ")):
                break
        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
        except EOFError:
            print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
            break
    return 0
