#!/usr/bin/env python3
"""
Example demonstrating dataclass binding and config file override.

Values are resolved in this order, later ones winning:
1. Dataclass defaults
2. Config file values (file named by the JOB_CONFIG environment variable)
3. Command-line arguments

Try:
    JOB_CONFIG=job.yaml python override_example.py --workers 8 input.csv
"""

import os
import sys
from dataclasses import dataclass, field

from bindargs import Args


@dataclass
class JobConfig:
    path: str = field(default="/default/path", metadata={"key": "p", "help": "A filesystem path"})
    threshold: float = field(default=0.0, metadata={"help": "Score threshold"})
    workers: int = field(default=4, metadata={"key": "w", "help": "Worker processes"})
    verbose: bool = field(default=False, metadata={"key": "v", "help": "Verbose output"})
    inputs: list[str] = field(default_factory=list, metadata={"remainder": "input files"})


def main() -> int:
    config = JobConfig()
    args = Args(sys.argv)
    args.bind(config)

    config_path = os.environ.get("JOB_CONFIG")
    if config_path:
        args.load_config(config_path)

    if not args.parse():
        print(args.errors())
        print(args.help())
        return 2

    print("Results:")
    print("-" * 20)
    for name, value in vars(config).items():
        print(f"{name}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
