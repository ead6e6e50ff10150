#!/usr/bin/env python3
"""
Hilbert Checker - Command Line Interface

Usage:
    python hilbert_cli.py <formulas.txt>           Check a file, one formula per line
    python hilbert_cli.py --repl                   Interactive REPL mode
    python hilbert_cli.py <file> --export out.txt  Write the report to a file
    python hilbert_cli.py <file> --json            Print verdicts as JSON
"""

import sys
import argparse
import json
import logging
import readline  # For REPL history/editing

from parser import ParseError
from axioms import AxiomError
from prover import IOUnavailable, Verifier, VerifierConfig, INVALID, UNPROVABLE


def colorize(text: str, color: str) -> str:
    """Add ANSI color to text."""
    colors = {
        'green': '\033[92m',
        'red': '\033[91m',
        'yellow': '\033[93m',
        'blue': '\033[94m',
        'bold': '\033[1m',
        'reset': '\033[0m'
    }
    return f"{colors.get(color, '')}{text}{colors['reset']}"


def print_verdict(verdict):
    """Pretty-print one verdict."""
    if verdict.ok:
        print(colorize("✓ " + verdict.describe(), "green"))
    elif verdict.status == INVALID:
        print(colorize("✗ " + verdict.describe(), "red"))
    elif verdict.status == UNPROVABLE:
        print(colorize("✗ " + verdict.describe(), "yellow"))
    else:
        print(colorize(f"Unexpected status: {verdict.status}", "yellow"))


def print_axioms(verifier: Verifier):
    axioms = verifier.list_axioms()
    if not axioms:
        print("No axioms.")
        return
    print("Axioms:")
    for template, name in axioms:
        print(f"  {template} : {name}")


def print_store(verifier: Verifier):
    entries = verifier.store.entries()
    if not entries:
        print("No accepted formulas.")
        return
    print("Accepted formulas:")
    for i, (formula, justification) in enumerate(entries, 1):
        print(f"  {i}. {formula}   ({justification.rule})")


def parse_axiom_option(value: str):
    """Split a NAME=TEMPLATE command line value."""
    name, sep, template = value.partition("=")
    if not sep or not name.strip() or not template.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=TEMPLATE, got {value!r}")
    return name.strip(), template.strip()


def verify_file(verifier: Verifier, filename: str, verbose: bool = True, json_output: bool = False):
    """Check every formula of a file. Returns True if all were accepted."""
    try:
        if verbose and not json_output:
            print(colorize(f"Checking: {filename}", "blue"))
            print()

        verdicts = verifier.import_file(filename)

        if json_output:
            print(json.dumps([v.to_dict() for v in verdicts], indent=2, ensure_ascii=False))
        else:
            for verdict in verdicts:
                print_verdict(verdict)
            if verbose:
                accepted = sum(1 for v in verdicts if v.ok)
                print()
                print(f"  Accepted: {accepted}/{len(verdicts)}")

        return all(v.ok for v in verdicts)

    except IOUnavailable as e:
        print(colorize(str(e), "red"))
        return False


def export_report(verifier: Verifier, filename: str) -> bool:
    try:
        path = verifier.export_file(filename)
    except IOUnavailable as e:
        print(colorize(str(e), "red"))
        return False
    print(colorize(f"Report written to {path}", "blue"))
    return True


HELP = """
Commands:
    <formula>                 Check a formula, e.g. p->(q->p)
    axioms                    List the axioms
    add-axiom NAME TEMPLATE   Add an axiom schema
    remove-axiom X            Remove an axiom by name or template
    import FILE               Check every formula in a file
    export FILE               Write the report so far to a file
    store                     Show accepted formulas
    help                      Show this help
    quit, exit                Exit the REPL

Examples:
    p->(q->p)
    add-axiom I p->p
    remove-axiom I
"""


def repl(verifier: Verifier):
    """Interactive REPL for checking formulas."""
    print(colorize("Hilbert Checker REPL", "bold"))
    print("Enter formulas to check. Type 'help' for commands, 'quit' to exit.")
    print()

    while True:
        try:
            line = input(colorize("hilbert> ", "blue")).strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            break

        if not line:
            continue

        command, _, rest = line.partition(" ")
        rest = rest.strip()

        if command in ('quit', 'exit'):
            print("Goodbye!")
            break

        if command == 'help':
            print(HELP)
            continue

        if command == 'axioms':
            print_axioms(verifier)
            continue

        if command == 'store':
            print_store(verifier)
            continue

        try:
            if command == 'add-axiom':
                name, _, template = rest.partition(" ")
                if not name or not template.strip():
                    print(colorize("Usage: add-axiom NAME TEMPLATE", "yellow"))
                    continue
                schema = verifier.add_axiom(name, template)
                print(colorize(f"  Axiom added: {schema}", "blue"))
            elif command == 'remove-axiom':
                schema = verifier.remove_axiom(rest)
                print(colorize(f"  Axiom removed: {schema}", "blue"))
            elif command == 'import':
                for verdict in verifier.import_file(rest):
                    print_verdict(verdict)
            elif command == 'export':
                export_report(verifier, rest)
            else:
                print_verdict(verifier.submit(line))

        except (ParseError, AxiomError, IOUnavailable) as e:
            print(colorize(f"Error: {e}", "red"))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Hilbert Checker CLI - Check implicational formulas against K, S and E",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    hilbert-check formulas.txt                 Check a file
    hilbert-check --repl                       Start interactive mode
    hilbert-check formulas.txt --export r.txt  Save the report
    hilbert-check formulas.txt --axiom I=p->p  Add an axiom first
        """
    )

    parser.add_argument('file', nargs='?', help='File with one formula per line')
    parser.add_argument('--repl', action='store_true', help='Start interactive REPL')
    parser.add_argument('--json', action='store_true', help='Output verdicts as JSON')
    parser.add_argument('--export', metavar='PATH', help='Write the report to PATH')
    parser.add_argument('--axiom', action='append', default=[], type=parse_axiom_option,
                        metavar='NAME=TEMPLATE', help='Add an axiom schema (repeatable)')
    parser.add_argument('--no-semantic', action='store_true',
                        help='Skip the tautology check on underivable formulas')
    parser.add_argument('-q', '--quiet', action='store_true', help='Quiet mode (less output)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log every decision')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    config = VerifierConfig.from_env()
    if args.no_semantic:
        config.semantic_check = False
    verifier = Verifier(config=config)

    try:
        for name, template in args.axiom:
            verifier.add_axiom(name, template)
    except (ParseError, AxiomError) as e:
        print(colorize(f"Invalid axiom: {e}", "red"))
        return 2

    if args.repl:
        repl(verifier)
        success = True
    elif args.file:
        success = verify_file(verifier, args.file, verbose=not args.quiet, json_output=args.json)
    else:
        parser.print_help()
        return 1

    if args.export and not export_report(verifier, args.export):
        return 1
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
