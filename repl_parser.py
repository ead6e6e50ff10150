#!/usr/bin/env python3
import sys
import os
import json

# Add the python directory to the start of sys.path
python_dir = os.path.join(os.path.dirname(__file__), "python")
if python_dir not in sys.path:
    sys.path.insert(0, python_dir)

from parser import parse, render, to_json, ParseError

def main():
    print("Hilbert Checker Parser REPL")
    print("Type a formula (e.g. 'p->(q->p)') or 'exit' to quit.")
    print("-" * 50)

    while True:
        try:
            line = input("parser> ").strip()
            if not line:
                continue
            if line.lower() in ("exit", "quit"):
                break

            ast = parse(line)
            print(f"canonical: {render(ast)}")
            print(json.dumps(to_json(ast), indent=2))

        except ParseError as e:
            print(f"Parse Error: {e}")
        except EOFError:
            break

if __name__ == "__main__":
    main()
