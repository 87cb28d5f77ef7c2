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
"""Cross-compiler language detection and implicit include path extraction.

The include search list is read from the preprocessor trace that GCC-family
compilers print on stderr for ``<compiler> -xc -E -v -``::

    #include "..." search starts here:
    #include <...> search starts here:
     /opt/arm-none-eabi/include/c++/13.2.1
     /opt/arm-none-eabi/include
    End of search list.

The marker lines are an unversioned convention, so all knowledge of them is
kept in this module.
"""

import os
import enum
import logging
from typing import List, Optional, Sequence

from .constants import (
    CXX_COMPILER_MARKERS,
    INCLUDE_SEARCH_END_MARKER,
    INCLUDE_SEARCH_START_MARKER,
    CLANG_COMPILER_MARKER,
    PROBE_FORWARDED_PREFIXES,
    CompilerInvocationError,
    IncludeParseError,
)
from .process_utils import ProcessRunner

logger = logging.getLogger(__name__)

# Number of stderr lines quoted when the trace cannot be parsed
TRACE_EXCERPT_LINES = 10


class Language(enum.Enum):
    """Source language selected by the compiler frontend."""

    C = "c"
    CXX = "c++"

    @property
    def compiler_flag(self) -> str:
        """Input language flag for the compiler probe (-xc or -xc++)."""
        return f"-x{self.value}"


def compiler_basename(compiler_path: str) -> str:
    """Return the executable name without directory or .exe suffix.

    Both '/' and '\\' are treated as separators so Windows paths are handled
    on any host.
    """
    name = compiler_path.replace("\\", "/").rsplit("/", 1)[-1]
    if name.lower().endswith(".exe"):
        name = name[: -len(".exe")]
    return name


def detect_language(compiler_path: str) -> Language:
    """Classify a compiler executable as a C or C++ frontend.

    Examples:
        >>> detect_language("/opt/gcc/bin/arm-none-eabi-g++")
        <Language.CXX: 'c++'>
        >>> detect_language("arm-none-eabi-gcc.exe")
        <Language.C: 'c'>
    """
    name = compiler_basename(compiler_path).lower()
    for marker in CXX_COMPILER_MARKERS:
        if marker in name:
            return Language.CXX
    # Anything unrecognized is treated as a C compiler
    return Language.C


def select_probe_args(compiler_path: str, forwarded: Sequence[str]) -> List[str]:
    """Pick the forwarded arguments that also affect the compiler's search list.

    Only clang-family compilers get them since GCC rejects --target=. A
    forwarded --config= belongs to clang-tidy (inline YAML or a file) and is
    never given to the compiler. The first argument for each prefix in
    PROBE_FORWARDED_PREFIXES is used.
    """
    if CLANG_COMPILER_MARKER not in compiler_basename(compiler_path).lower():
        return []

    probe_args: List[str] = []
    for prefix in PROBE_FORWARDED_PREFIXES:
        match = next((arg for arg in forwarded if arg.startswith(prefix)), None)
        if match is not None:
            probe_args.append(match)
    return probe_args


def build_probe_command(compiler_path: str, language: Language, probe_args: Sequence[str] = ()) -> List[str]:
    return [compiler_path, *probe_args, language.compiler_flag, "-E", "-v", "-"]


def _normalize_include_dir(line: str) -> str:
    return line.strip().replace("\\", "/")


def parse_include_search_list(trace: str) -> List[str]:
    """Parse the '#include <...>' search list out of a compiler -v trace.

    Args:
        trace: Captured stderr of the compiler probe

    Returns:
        Include directories in search order, duplicates removed (first wins)

    Raises:
        IncludeParseError: If the start marker is missing
    """
    include_dirs: List[str] = []
    seen = set()
    in_block = False
    found_start = False

    for line in trace.splitlines():
        stripped = line.strip()
        if not in_block:
            if stripped.startswith(INCLUDE_SEARCH_START_MARKER):
                in_block = True
                found_start = True
            continue
        if stripped.startswith(INCLUDE_SEARCH_END_MARKER):
            break
        if not stripped:
            continue
        include_dir = _normalize_include_dir(stripped)
        if include_dir in seen:
            logger.debug("Skipping duplicate include directory: %s", include_dir)
            continue
        seen.add(include_dir)
        include_dirs.append(include_dir)
    else:
        if in_block:
            logger.warning("Compiler trace ended without '%s'", INCLUDE_SEARCH_END_MARKER)

    if not found_start:
        excerpt = "\n".join(trace.splitlines()[:TRACE_EXCERPT_LINES]) or "(no output)"
        raise IncludeParseError(f"'{INCLUDE_SEARCH_START_MARKER}' not found in compiler output:\n{excerpt}")

    return include_dirs


def extract_include_paths(
    compiler_path: str, language: Language, runner: Optional[ProcessRunner] = None, probe_args: Sequence[str] = ()
) -> List[str]:
    """Ask the cross-compiler for its implicit include search directories.

    Args:
        compiler_path: Cross-compiler executable
        language: Language whose search list is requested
        runner: Process runner (default: ProcessRunner())
        probe_args: Extra arguments for the probe (e.g. --target=...)

    Returns:
        Include directories in search order

    Raises:
        CompilerInvocationError: If the compiler cannot be started
        IncludeParseError: If the compiler output has no search list
    """
    if runner is None:
        runner = ProcessRunner()

    command = build_probe_command(compiler_path, language, probe_args)
    try:
        result = runner.capture(command)
    except OSError as e:
        raise CompilerInvocationError(f"cannot run '{compiler_path}': {e.strerror or e}") from e

    # Some cross-compilers exit non-zero for this probe; only the trace matters
    if result.exit_code != 0:
        logger.debug("Compiler probe exited with code %s", result.exit_code)

    include_dirs = parse_include_search_list(result.stderr)
    for include_dir in include_dirs:
        if not os.path.isdir(include_dir):
            logger.debug("Include directory does not exist on this host: %s", include_dir)
    logger.debug("Found %s implicit include directories for %s", len(include_dirs), compiler_path)
    return include_dirs
