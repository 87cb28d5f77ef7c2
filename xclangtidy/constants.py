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
"""Shared constants and exception classes for x-clang-tidy.

This module provides the exit codes, well-known file names and the exception
hierarchy used across the adapter so that every stage reports failures the
same way.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 2  # Matches argparse usage errors
EXIT_PIPELINE_ERROR = 125  # Failure before clang-tidy was spawned
EXIT_TOOL_NOT_EXECUTABLE = 126  # clang-tidy exists but cannot be executed
EXIT_TOOL_NOT_FOUND = 127  # clang-tidy could not be found
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Configuration Files
# =============================================================================

PLAIN_CONFIG_SUFFIX = ".json"
TEMPLATED_CONFIG_SUFFIX = ".json.hbt"

# Looked up in the current directory (in this order) when no config path is given
DEFAULT_CONFIG_FILES = ["x-clang-tidy.json.hbt", "x-clang-tidy.json"]

# JSON keys
CONFIG_KEY_CLANG_TIDY = "clang-tidy"
CONFIG_KEY_EXTRA_ARGS = "extra-args"
CONFIG_KEY_FILTER_ARGS = "filter-args"

# =============================================================================
# Compiler Probe
# =============================================================================

INCLUDE_SEARCH_START_MARKER = "#include <...> search starts here:"
INCLUDE_SEARCH_END_MARKER = "End of search list."

# Forwarded arguments that are also handed to a clang-family compiler probe
PROBE_FORWARDED_PREFIXES = ["--target="]
CLANG_COMPILER_MARKER = "clang"

# Markers in a compiler base name that select the C++ frontend
CXX_COMPILER_MARKERS = ["clang++", "g++", "c++"]

# =============================================================================
# Analysis Tool
# =============================================================================

DEFAULT_CLANG_TIDY = "clang-tidy"
EXTRA_ARG_PREFIX = "-extra-arg="
INCLUDE_FLAG = "-I"

# =============================================================================
# Exception Classes
# =============================================================================


class XClangTidyError(Exception):
    """Base exception for all x-clang-tidy errors.

    All exceptions carry an exit_code attribute that indicates what exit code
    the program should use when this error is caught at the main entry point,
    and a stage name used as the prefix of the printed error message.
    """

    stage = "x-clang-tidy"

    def __init__(self, message: str, exit_code: int = EXIT_PIPELINE_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Configuration errors
class ConfigParseError(XClangTidyError):
    """Raised when the configuration document is malformed."""

    stage = "config"


class ConfigReadError(ConfigParseError):
    """Raised when the configuration file cannot be read."""


class UndefinedVariableError(XClangTidyError):
    """Raised when a template expression references an unset environment variable."""

    stage = "template"

    def __init__(self, name: str):
        super().__init__(f"environment variable '{name}' is not set")
        self.name = name


# Compiler probe errors
class CompilerInvocationError(XClangTidyError):
    """Raised when the cross-compiler cannot be started."""

    stage = "compiler"


class IncludeParseError(XClangTidyError):
    """Raised when the compiler trace lacks the include search list markers."""

    stage = "include search"


# Analysis tool errors
class AnalysisToolInvocationError(XClangTidyError):
    """Raised when clang-tidy cannot be started."""

    stage = "clang-tidy"

    def __init__(self, message: str, exit_code: int = EXIT_TOOL_NOT_FOUND):  # pylint: disable=useless-parent-delegation
        super().__init__(message, exit_code)
