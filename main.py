#!/usr/bin/env python3
"""
Eliza Responder - Main Entry Point
==================================

Command-line interface for the rule-based responder.

Usage:
    python main.py                      # Start an interactive conversation
    python main.py --say "I need help"  # Answer one line and exit
    python main.py --check              # Validate the rules file
    python main.py --help               # Show help
"""

import sys
import argparse
from pathlib import Path
from typing import Callable, List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from core.config import load_config, Config, SessionConfig
from core.logging import setup_logging, get_logger
from core.exceptions import ResponderError
from rules.compiler import load_raw_rules, compile_rules, unfillable_placeholders
from rules.engine import Responder

logger = get_logger("main")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Eliza Responder - rule-based conversational responder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                        Talk interactively
  python main.py --say "I need a break" Answer one line
  python main.py --check --rules my.yaml Validate a rules file
  python main.py --seed 42              Reproducible replies
        """
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--say",
        type=str,
        metavar="TEXT",
        help="Answer a single line of input and exit"
    )
    mode_group.add_argument(
        "--check",
        action="store_true",
        help="Load and compile the rules file, then print a summary"
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--rules",
        type=str,
        metavar="PATH",
        help="Path to rules file (overrides configuration)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for response selection"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def run_check(config: Config) -> int:
    """
    Compile the configured rules and print a per-category summary.

    Returns:
        Exit code (0 when the table compiles)
    """
    rules_file = config.rules.rules_file or None
    raw = load_raw_rules(rules_file, config.rules.category_order or None)
    table = compile_rules(raw)

    print(f"Rules OK: {len(table)} groups, {table.pattern_count} patterns")
    for category in table.categories():
        groups = [g for g in table if g.category == category]
        patterns = sum(len(g.patterns) for g in groups)
        print(f"  {category:<12} {len(groups):>3} groups {patterns:>4} patterns")

    for index, group in enumerate(table):
        for template, missing in unfillable_placeholders(group).items():
            print(f"  warning: group {index} template {template!r} leaves {missing} unfilled")

    if table.categories()[-1:] != ("fallback",):
        print("  warning: table does not end with a fallback category")

    return 0


def run_conversation(
    responder: Responder,
    session: SessionConfig,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print
) -> None:
    """
    Run the interactive loop until EOF or a quit word.

    Args:
        responder: Responder answering each line
        session: Session settings (greeting, prompt, quit words)
        read_line: Line reader, ``input`` by default
        write: Output function, ``print`` by default
    """
    quit_words = {word.strip().lower() for word in session.quit_words}

    write(session.greeting)
    while True:
        try:
            line = read_line(session.prompt)
        except EOFError:
            break

        if line.strip().lower() in quit_words:
            break

        reply = responder.respond(line)
        write(reply if reply is not None else "I have nothing to say to that.")

    write(session.farewell)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)

        # Apply command-line overrides
        if args.rules:
            config.rules.rules_file = args.rules
        if args.seed is not None:
            config.session.seed = args.seed
        if args.debug:
            config.debug = True
            config.logging.level = "DEBUG"
        config.validate()

        setup_logging(
            log_dir=config.logging.log_dir or None,
            log_level=config.logging.level,
            json_format=config.logging.json_format,
            console_output=True
        )

        if args.check:
            return run_check(config)

        responder = Responder.from_config(config)

        if args.say is not None:
            reply = responder.respond(args.say)
            if reply is None:
                print("No rule matched the input", file=sys.stderr)
                return 1
            print(reply)
            return 0

        run_conversation(responder, config.session)
        return 0

    except ResponderError as e:
        logger.error(f"Startup failed: {e}")
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 0


if __name__ == "__main__":
    sys.exit(main())
