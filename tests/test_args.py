"""
Tests for the Args session: declaration, help output, error reporting and
the different kinds of write-targets.
"""

import pathlib
from dataclasses import dataclass, field
from typing import Optional

import pytest
from result import Err, Ok

from bindargs import Args, AttrRef, DuplicateRegistrationError, ErrorKind, ItemRef, ref


@dataclass
class Options:
    infile: str = ""
    tmppath: str = ""
    outfile: list[str] = field(default_factory=list)
    rate: float = 0.0
    debug: bool = False
    verbose: bool = False


def declare(args, opts):
    args.arg((opts, "infile"), "i", "input", "Specify the input file", "./in.foo")
    args.arg((opts, "tmppath"), "t", "temp", "Path for temporary files", "/tmp/")
    args.arg((opts, "rate"), "r", "rate", "Rate of entropy", 0.75)
    args.arg((opts, "debug"), "d", "debug", "Start in daemon mode")
    args.arg((opts, "verbose"), "v", "verbose", "Level of verbosity")


class TestDefaults:
    """Defaults are written at declaration and shown in help."""

    def test_default_written_when_not_supplied(self):
        opts = Options()
        args = Args(["prog"])
        declare(args, opts)

        assert args.parse()
        assert opts.infile == "./in.foo"
        assert opts.tmppath == "/tmp/"
        assert opts.rate == 0.75
        assert "[default: ./in.foo]" in args.help()
        assert "[default: 0.75]" in args.help()

    def test_no_default_keeps_existing_value(self):
        opts = Options(infile="preset")
        args = Args(["prog"])
        args.arg((opts, "infile"), "i", "input", "Input")

        assert args.parse()
        assert opts.infile == "preset"
        assert "default" not in args.help()

    def test_none_is_a_valid_default(self):
        @dataclass
        class Holder:
            name: Optional[str] = "x"

        holder = Holder()
        args = Args(["prog", "--name", "y"])
        param = args.arg((holder, "name"), "n", "name", "Name", None)

        assert holder.name is None
        assert param.has_default
        assert args.parse()
        assert param.value_type is str
        assert holder.name == "y"

    def test_is_set_tracks_command_line(self):
        opts = Options()
        args = Args(["prog", "-d"])
        declare(args, opts)
        args.parse()

        assert args.parameters.resolve_by_name("debug").is_set
        assert not args.parameters.resolve_by_name("rate").is_set


class TestTypeResolution:
    def test_type_from_annotation(self):
        opts = Options()
        args = Args(["prog"])
        param = args.arg((opts, "rate"), "r", "rate", "Rate")
        assert param.value_type is float
        assert not param.has_default

    def test_type_from_default_for_mapping_target(self):
        settings = {}
        args = Args(["prog", "--workers", "8"])
        param = args.arg((settings, "workers"), "w", "workers", "Workers", 2)

        assert isinstance(param.target, ItemRef)
        assert param.value_type is int
        assert args.parse()
        assert settings == {"workers": 8}

    def test_type_from_current_value(self):
        class Plain:
            def __init__(self):
                self.level = 3

        plain = Plain()
        args = Args(["prog", "-l", "4"])
        param = args.arg((plain, "level"), "l", "level", "Level")
        assert param.value_type is int
        assert args.parse()
        assert plain.level == 4

    def test_explicit_type(self):
        settings = {}
        args = Args(["prog", "--out", "/tmp/x"])
        args.arg((settings, "out"), None, "out", "Output", type=pathlib.Path)
        assert args.parse()
        assert settings["out"] == pathlib.Path("/tmp/x")

    def test_unknown_attribute_rejected(self):
        args = Args(["prog"])
        with pytest.raises(AttributeError):
            args.arg((Options(), "missing"), "m", "missing", "Nope")

    def test_bad_target_rejected(self):
        args = Args(["prog"])
        with pytest.raises(TypeError):
            args.arg("not a target", "m", "missing", "Nope")

    def test_ref_picks_target_kind(self):
        assert isinstance(ref({}, "a"), ItemRef)
        assert isinstance(ref(Options(), "rate"), AttrRef)

    def test_custom_converter(self):
        settings = {}
        args = Args(["prog", "--level", "high"])
        args.arg(
            (settings, "level"),
            None,
            "level",
            "Level",
            converter=lambda raw: Ok(raw.upper()),
        )
        assert args.parse()
        assert settings["level"] == "HIGH"


class TestRegistrationErrors:
    def test_duplicate_does_not_overwrite_field(self):
        opts = Options()
        args = Args(["prog"])
        args.arg((opts, "infile"), "i", "input", "Input", "first")

        with pytest.raises(DuplicateRegistrationError):
            args.arg((opts, "tmppath"), "i", "temp", "Temp", "second")
        assert opts.tmppath == ""

    def test_second_remainder_rejected(self):
        args = Args(["prog"])
        args.remainder("output path")
        with pytest.raises(DuplicateRegistrationError):
            args.remainder("other")


class TestHelpAndUsage:
    def test_usage_line(self):
        args = Args(["./foo"])
        declare(args, Options())
        args.remainder("output path")
        assert args.usage() == "Usage: ./foo -itrdv <output path>"

    def test_help_layout(self):
        args = Args(["./foo"])
        declare(args, Options())
        args.remainder("output path")
        lines = args.help().split("\n")

        assert lines[0] == "Usage: ./foo -itrdv <output path>"
        assert lines[1] == (
            " -i    --input     [default: ./in.foo]     Specify the input file"
        )
        assert lines[4].startswith(" -d    --debug")
        assert lines[4].endswith("Start in daemon mode")
        assert args.help().endswith("\n\n")

    def test_help_and_usage_are_idempotent(self):
        args = Args(["./foo", "-d"])
        declare(args, Options())
        assert args.help() == args.help()
        assert args.usage() == args.usage()
        before = args.help()
        args.parse()
        assert args.help() == before

    def test_empty_argv(self):
        args = Args([])
        assert args.process_name == ""
        assert args.parse()

    def test_argv_defaults_to_sys_argv(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["tool", "-d"])
        opts = Options()
        args = Args()
        args.arg((opts, "debug"), "d", "debug", "Debug")
        assert args.process_name == "tool"
        assert args.parse()
        assert opts.debug is True


class TestErrorReporting:
    def test_errors_text(self):
        opts = Options()
        args = Args(["prog", "--rate=notanumber", "-x"])
        declare(args, opts)
        assert not args.parse()

        lines = args.errors().splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("Error: Invalid Argument @ [notanumber]")
        assert lines[1].startswith("Error: Unknown Argument @ [-x]")

    def test_reparse_resets_is_set(self):
        opts = Options()
        argv = ["prog", "-d"]
        args = Args(argv)
        declare(args, opts)
        assert args.parse()
        assert args.parameters.resolve_by_name("debug").is_set
        argv[1] = "-v"
        assert args.parse()
        assert not args.parameters.resolve_by_name("debug").is_set
        assert args.parameters.resolve_by_name("verbose").is_set

    def test_reparse_resets_errors(self):
        opts = Options()
        argv = ["prog", "-x"]
        args = Args(argv)
        declare(args, opts)
        assert not args.parse()
        argv[1] = "-d"
        assert args.parse()
        assert args.error_list == []
        assert args.errors() == ""

    def test_safe_parse_ok(self):
        args = Args(["prog", "-d", "out"])
        declare(args, Options())
        assert args.safe_parse() == Ok(["out"])

    def test_safe_parse_err(self):
        args = Args(["prog", "-x"])
        declare(args, Options())
        outcome = args.safe_parse()
        assert isinstance(outcome, Err)
        assert [e.kind for e in outcome.err_value] == [ErrorKind.UNKNOWN_KEY]


class TestRemainderTarget:
    def test_remainder_written_to_target(self):
        opts = Options()
        args = Args(["prog", "-d", "a", "b"])
        declare(args, opts)
        args.remainder("output path", (opts, "outfile"))

        assert args.parse()
        assert opts.outfile == ["a", "b"]
        assert opts.outfile is not args.remaining

    def test_remainder_target_written_even_on_errors(self):
        opts = Options()
        args = Args(["prog", "-x", "a"])
        declare(args, opts)
        args.remainder("output path", (opts, "outfile"))

        assert not args.parse()
        assert opts.outfile == ["a"]
