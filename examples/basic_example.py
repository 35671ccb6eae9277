#!/usr/bin/env python3
"""
Example script demonstrating the usage of bindargs.

Try:
    python basic_example.py -dvi /input/file -t=/tmp/path/ --rate 0.9 /output/file
    python basic_example.py --rate=notanumber
"""

import sys
from dataclasses import dataclass

from bindargs import Args


@dataclass
class Options:
    """Options filled in directly by the parser."""

    infile: str = ""
    tmppath: str = ""
    outfile: str = ""
    rate: float = 0.0
    debug: bool = False
    verbose: bool = False


def main() -> int:
    """Main function demonstrating the parser."""
    options = Options()

    args = Args(sys.argv)
    args.arg((options, "infile"), "i", "input", "Specify the input file", "./in.foo")
    args.arg((options, "tmppath"), "t", "temp", "Path for temporary files", "/tmp/")
    args.arg((options, "rate"), "r", "rate", "Rate of entropy", 0.75)
    args.arg((options, "debug"), "d", "debug", "Start in daemon mode")
    args.arg((options, "verbose"), "v", "verbose", "Level of verbosity")
    args.remainder("output path")

    if not args.parse():
        print(args.errors())
        print(args.help())
        return 1

    # Checks for required or conflicting arguments and value ranges belong here.
    if args.remaining:
        options.outfile = args.remaining[0]

    print("Parsed Configuration:")
    print("-" * 30)
    print(f"Input:   {options.infile}")
    print(f"Temp:    {options.tmppath}")
    print(f"Output:  {options.outfile}")
    print(f"Rate:    {options.rate}")
    print(f"Debug:   {options.debug}")
    print(f"Verbose: {options.verbose}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
