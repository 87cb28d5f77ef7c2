#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""Run clang-tidy on code built with a GCC-family cross-compiler.

PURPOSE:
    clang-tidy does not know the implicit system include directories of an
    embedded cross-compiler such as arm-none-eabi-gcc, so headers like
    <stdint.h> or <vector> resolve to the host's copies (or not at all).
    This adapter asks the cross-compiler for its include search list and
    passes it to clang-tidy, together with configured extra arguments, while
    dropping compiler flags clang-tidy cannot parse.

WHAT IT DOES:
    - Detects C or C++ from the compiler name (g++, c++, clang++ => C++)
    - Loads x-clang-tidy.json / x-clang-tidy.json.hbt (optional)
    - Runs '<compiler> -xc[++] -E -v -' and parses the include search list
    - Runs clang-tidy with:
        -extra-arg=<extra-args...> -extra-arg=-I<include dirs...> <forwarded args>
      where forwarded args matching a filter-args prefix are dropped

CONFIGURATION:
    {
        "clang-tidy": "/opt/llvm/bin/clang-tidy",
        "extra-args": ["--target=arm-none-eabi"],
        "filter-args": ["-specs=", "-mthumb-interwork"]
    }
    Files named *.json.hbt may use {{env "NAME"}} to insert environment variables.

Usage:
    xClangTidy.py [--verbose] [--no-color] <compiler> [config.json[.hbt]] [clang-tidy args...]

Exit Codes:
    clang-tidy's exit code, or
    2: Invalid arguments
    125: Configuration or compiler probe failed (clang-tidy not started)
    126: clang-tidy could not be executed
    127: clang-tidy not found
    130: Interrupted
"""

import os
import sys
import shlex
import logging
import argparse
import traceback
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

# Check colorama early with a helpful error message if it is too old
from xclangtidy.package_verification import require_package
require_package("colorama", "colored diagnostics")

from xclangtidy.argument_utils import assemble_arguments
from xclangtidy.color_utils import Colors, print_error, print_warning, should_use_color
from xclangtidy.compiler_utils import detect_language, extract_include_paths, select_probe_args
from xclangtidy.config_utils import Configuration, describe_config, find_default_config, is_config_path, load_config
from xclangtidy.constants import (
    DEFAULT_CLANG_TIDY,
    EXIT_INVALID_ARGS,
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_PIPELINE_ERROR,
    EXIT_TOOL_NOT_EXECUTABLE,
    EXIT_TOOL_NOT_FOUND,
    AnalysisToolInvocationError,
    XClangTidyError,
)
from xclangtidy.process_utils import ProcessRunner
from xclangtidy.template_utils import EnvLookup
from xclangtidy.tool_detection import find_clang_tidy

__version__ = "1.0.0"

# Export for tests
__all__ = ["Invocation", "split_invocation", "build_command", "run_clang_tidy", "main"]

logger = logging.getLogger(__name__)


@dataclass
class Invocation:
    """Positional command line of the adapter.

    Attributes:
        compiler_path: Cross-compiler executable
        config_path: Configuration file given on the command line, if any
        forwarded: Arguments passed on to clang-tidy (subject to filtering)
    """

    compiler_path: str
    config_path: Optional[str] = None
    forwarded: List[str] = field(default_factory=list)


def split_invocation(compiler_path: str, rest: Sequence[str]) -> Invocation:
    """Decide whether the argument after the compiler is a config file.

    It is taken as the config path only if it has a config suffix (.json or
    .json.hbt) and is a readable file; otherwise it is the first forwarded
    argument. A forwarded argument that happens to name an existing .json
    file is therefore consumed as config.
    """
    if rest and is_config_path(rest[0]):
        return Invocation(compiler_path, rest[0], list(rest[1:]))
    return Invocation(compiler_path, None, list(rest))


def split_command_line(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split argv into adapter options and the compiler invocation.

    Adapter options are only recognized before the compiler path; everything
    from the compiler path on is kept verbatim (including '--').
    """
    for index, arg in enumerate(argv):
        if not arg.startswith("-"):
            return list(argv[:index]), list(argv[index:])
    return list(argv), []


def resolve_tool_path(config: Configuration) -> str:
    """Return the clang-tidy to run: the configured one or the first found on PATH."""
    if config.tool_path:
        return config.tool_path

    tool_info = find_clang_tidy()
    if tool_info.is_found():
        assert tool_info.full_command is not None  # For type checker
        return tool_info.full_command

    # Let the spawn fail so the error is reported like any other missing tool
    logger.debug("clang-tidy %s", tool_info.error_message)
    return DEFAULT_CLANG_TIDY


def build_command(invocation: Invocation, runner: ProcessRunner, lookup: EnvLookup = os.environ.get, cwd: str = ".") -> List[str]:
    """Run the pipeline up to the final clang-tidy command line.

    Args:
        invocation: Parsed positional arguments
        runner: Process runner used for the compiler probe
        lookup: Environment lookup for templated configs
        cwd: Directory searched for the default config files

    Returns:
        clang-tidy executable followed by its arguments

    Raises:
        XClangTidyError: If any stage fails; nothing has been executed then
    """
    language = detect_language(invocation.compiler_path)
    logger.debug("Compiler: %s (%s)", invocation.compiler_path, language.name)

    config_path = invocation.config_path or find_default_config(cwd)
    if config_path:
        config = load_config(config_path, lookup)
    else:
        config = Configuration()
    for line in describe_config(config):
        logger.debug("Config %s", line)

    probe_args = select_probe_args(invocation.compiler_path, invocation.forwarded)
    include_paths = extract_include_paths(invocation.compiler_path, language, runner, probe_args)
    for include_path in include_paths:
        logger.debug("Include: %s", include_path)

    arguments = assemble_arguments(config, include_paths, invocation.forwarded)
    return [resolve_tool_path(config), *arguments]


def run_clang_tidy(command: List[str], runner: ProcessRunner) -> int:
    """Execute clang-tidy with inherited stdio and return its exit code.

    A child killed by a signal is reported as 128 + signal number.

    Raises:
        AnalysisToolInvocationError: If clang-tidy cannot be started
    """
    logger.debug("Command: %s", shlex.join(command))
    try:
        exit_code = runner.run(command)
    except FileNotFoundError as e:
        raise AnalysisToolInvocationError(f"cannot find '{command[0]}': {e.strerror or e}", EXIT_TOOL_NOT_FOUND) from e
    except OSError as e:
        raise AnalysisToolInvocationError(f"cannot execute '{command[0]}': {e.strerror or e}", EXIT_TOOL_NOT_EXECUTABLE) from e

    if exit_code < 0:
        return 128 - exit_code
    return exit_code


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="x-clang-tidy",
        description="Run clang-tidy with the implicit include directories of a GCC-family cross-compiler.",
        epilog=f"Version {__version__}\n\nExamples:\n"
        "  %(prog)s arm-none-eabi-g++ -p build src/main.cpp\n"
        "  %(prog)s arm-none-eabi-gcc x-clang-tidy.json.hbt -p build src/board.c\n"
        "  %(prog)s --verbose /opt/gcc/bin/arm-none-eabi-g++ src/main.cpp -- -specs=nano.specs\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("compiler", metavar="COMPILER", help="Path to the cross-compiler (e.g. arm-none-eabi-g++)")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output to stderr")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def main(argv: Optional[Sequence[str]] = None, runner: Optional[ProcessRunner] = None, lookup: EnvLookup = os.environ.get) -> int:
    """Main entry point for the adapter.

    Args:
        argv: Command line without the program name (default: sys.argv[1:])
        runner: Process runner (default: ProcessRunner())
        lookup: Environment lookup for templated configs

    Returns:
        clang-tidy's exit code, or an adapter error code
    """
    if argv is None:
        argv = sys.argv[1:]
    if runner is None:
        runner = ProcessRunner()

    options, positional = split_command_line(argv)
    args = create_parser().parse_args(options + positional[:1])

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(log_level)

    if not should_use_color(no_color=args.no_color):
        Colors.disable()

    if not args.compiler.strip():
        print_error("compiler path must not be empty")
        return EXIT_INVALID_ARGS

    logger.debug("x-clang-tidy %s", __version__)
    logger.debug("cwd: %s", os.getcwd())

    invocation = split_invocation(positional[0], positional[1:])
    if invocation.config_path:
        logger.debug("Config path: %s", invocation.config_path)

    try:
        command = build_command(invocation, runner, lookup)
        return run_clang_tidy(command, runner)
    except XClangTidyError as e:
        print_error(f"{e.stage}: {e}")
        if args.verbose:
            traceback.print_exc(file=sys.stderr)
        return e.exit_code


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print_warning("Interrupted.", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except Exception as e:  # pylint: disable=broad-exception-caught
        print_error(f"Fatal error: {e}", prefix=False)
        sys.exit(EXIT_PIPELINE_ERROR)


if __name__ == "__main__":
    run()
