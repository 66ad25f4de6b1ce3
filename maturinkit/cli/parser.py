"""
MaturinKit CLI argument parser.

This module implements the command-line interface for MaturinKit using argparse.
Every flag mirrors one input; flags left unset fall back to INPUT_* environment
variables, then to maturinkit.yaml.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from maturinkit.config.inputs import ActionInputs, load_inputs
from maturinkit.core import reporting

try:
    from importlib.metadata import version

    __version__ = version("maturinkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

# (flag, metavar, help)
INPUT_FLAGS = (
    ("command", "NAME", "maturin subcommand, e.g. build, publish (default: build)"),
    ("args", "ARGS", "Arguments passed to maturin, e.g. --args='--release'"),
    ("target", "TARGET", "Rust target triple or alias (x64, aarch64, armv7, ...)"),
    ("manylinux", "TIER", "manylinux tier (auto, 2010, 2014, 2_24, off, ...)"),
    ("container", "IMAGE", "Docker image for the build, or 'off'"),
    ("rust-toolchain", "CHANNEL", "Rust toolchain channel, e.g. stable"),
    ("maturin-version", "VERSION", "maturin version (default: latest)"),
    ("extra-build-command", "SHELL", "Shell line run in the container first"),
)


class CLI:
    """MaturinKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="maturinkit",
            description="MaturinKit - build Python wheels with maturin",
            epilog="Unset inputs come from INPUT_<NAME> variables or maturinkit.yaml",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"MaturinKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./maturinkit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=None,
            help="Directory containing maturinkit.yaml (default: current directory)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Print the build plan without running anything",
        )

        inputs = parser.add_argument_group("build inputs")
        for name, metavar, help_text in INPUT_FLAGS:
            inputs.add_argument(f"--{name}", metavar=metavar, help=help_text)

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)
        self._configure_logging(parsed_args)

        try:
            inputs = load_inputs(
                overrides=self._input_overrides(parsed_args),
                config_file=parsed_args.config,
                project_root=parsed_args.project_root,
            )
            if parsed_args.dry_run:
                return self._print_plan(inputs)
            self._run_build(inputs)
            return 0
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return reporting.set_failed(str(e))

    def _input_overrides(self, args) -> Dict[str, str]:
        overrides = {}
        for name, _, _ in INPUT_FLAGS:
            value = getattr(args, name.replace("-", "_"))
            if value is not None:
                overrides[name] = value
        return overrides

    def _run_build(self, inputs: ActionInputs) -> None:
        from maturinkit.dispatch.dispatcher import Dispatcher

        Dispatcher(inputs).run()

    def _print_plan(self, inputs: ActionInputs) -> int:
        from maturinkit.dispatch.dispatcher import Dispatcher

        dispatcher = Dispatcher(inputs)
        plan = dispatcher.plan()
        tag = dispatcher.resolve_tag()

        print(f"maturin:  {tag}")
        print(f"target:   {plan.target or '<host>'}")
        print(f"mode:     {'container' if plan.containerized else 'host'}")
        print(f"command:  maturin {' '.join(plan.args)}")
        if plan.containerized:
            image = dispatcher.container_image(plan, tag)
            print(f"image:    {image.reference}")
            if image.entrypoint:
                print(f"entrypoint: {image.entrypoint}")
            print()
            print(dispatcher.container_script(plan, tag).render())
        return 0

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
