import argparse
import logging
import os
import shutil
import subprocess
import sys

from . import __version__
from .compiler import CompilationOptions, compile_with_options, get_compilation_stats
from .errors import CompilationError


def default_output(input_file):
    stem = os.path.splitext(os.path.basename(input_file))[0]
    return stem + ".js"


def build_parser():
    parser = argparse.ArgumentParser(prog="tfic", description="TFI Language Compiler (tfic)")
    parser.add_argument("input", nargs="?", default="main.tfi", help="Input TFI file (default: main.tfi)")
    parser.add_argument("-o", "--output", help="Output JavaScript file (default: <input>.js)")
    parser.add_argument("-f", "--format", action="store_true", help="Format the output JavaScript code")
    parser.add_argument("-c", "--comments", action="store_true", help="Add source comments to output")
    parser.add_argument("-s", "--strict", action="store_true", help="Enable strict mode")
    parser.add_argument("-m", "--minify", action="store_true", help="Minify the output")
    parser.add_argument("--stats", action="store_true", help="Print a compilation summary")
    parser.add_argument("--run", action="store_true", help="Execute the output with node")
    parser.add_argument("--verbose", action="store_true", help="Log compiler stages")
    parser.add_argument("-v", "--version", action="version", version=f"TFI Language Compiler v{__version__}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if not args.input.endswith('.tfi'):
        print(f"Error: Input file must have a .tfi extension (e.g., main.tfi), got {args.input}")
        sys.exit(1)

    try:
        with open(args.input) as f:
            source = f.read()
    except OSError as e:
        print(f"Error: cannot read {args.input}: {e.strerror}")
        sys.exit(1)

    options = CompilationOptions(
        format_output=args.format,
        add_comments=args.comments,
        strict_mode=args.strict,
        minify=args.minify,
    )

    try:
        result = compile_with_options(source, options)
    except CompilationError as e:
        print(e.render(), file=sys.stderr)
        sys.exit(1)

    output = args.output if args.output else default_output(args.input)
    with open(output, "w") as f:
        f.write(result.js_code)
    print(f"Compiled successfully! Output written to: {output}")

    if result.has_warnings():
        print("Compilation warnings:", file=sys.stderr)
        for warning in result.warnings:
            print(f"  {warning}", file=sys.stderr)

    if args.stats:
        print(get_compilation_stats(source).summary())

    if args.run:
        node = shutil.which("node")
        if node is None:
            print("Error: node was not found on PATH")
            sys.exit(1)
        res = subprocess.run([node, output], capture_output=True, text=True)
        sys.stdout.write(res.stdout)
        sys.stderr.write(res.stderr)
        if res.returncode != 0:
            sys.exit(res.returncode)


if __name__ == '__main__':
    main()
