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
"""Detection of the clang-tidy executable.

Used when the configuration does not name clang-tidy explicitly. Detection
results are cached within the Python process.

CLI Interface:
    python3 -m xclangtidy.tool_detection --find-clang-tidy   # Output command path, exit 0/1
    python3 -m xclangtidy.tool_detection --check-all         # Output JSON with version info
    python3 -m xclangtidy.tool_detection --verbose           # Enable debug logging
"""

import sys
import json
import shutil
import logging
import argparse
import subprocess
from typing import Optional, Dict, List
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Tool command variants to try (in order of preference)
CLANG_TIDY_COMMANDS = ["clang-tidy", "clang-tidy-20", "clang-tidy-19", "clang-tidy-18"]

# Session-level cache for tool detection results (keyed by function name)
_tool_cache: Dict[str, "ToolInfo"] = {}


@dataclass
class ToolInfo:
    """Information about a detected external tool.

    Attributes:
        command: Command name as tried (e.g., "clang-tidy-19")
        full_command: Absolute path resolved from PATH
        error_message: Why the tool was not found (None when found)
    """

    command: Optional[str]
    full_command: Optional[str]
    error_message: Optional[str] = None

    def is_found(self) -> bool:
        """Check if tool was found."""
        return self.command is not None


def clear_cache() -> None:
    """Clear the tool detection cache.

    Useful for testing or when PATH changes during process lifetime.
    """
    _tool_cache.clear()
    logger.debug("Tool detection cache cleared")


def _try_command(cmd_parts: List[str], timeout: int = 5) -> Optional[str]:
    """Run a command with --version and return its output, or None on failure."""
    try:
        result = subprocess.run(cmd_parts + ["--version"], capture_output=True, text=True, check=True, timeout=timeout)
        return result.stdout.strip()
    except (subprocess.CalledProcessError, OSError, subprocess.TimeoutExpired):
        return None


def _extract_version(output: str) -> str:
    """Extract the version line from clang-tidy --version output.

    clang-tidy prints a banner line first ("LLVM (http://llvm.org/):"), so the
    first line mentioning "version" is preferred over the first line.
    """
    lines = [line.strip() for line in output.split("\n") if line.strip()]
    for line in lines:
        if "version" in line.lower():
            return line
    return lines[0] if lines else output.strip()


def find_clang_tidy() -> ToolInfo:
    """Find a clang-tidy executable on PATH.

    Tries commands in order: clang-tidy, clang-tidy-20, clang-tidy-19, clang-tidy-18

    Returns:
        ToolInfo with command and resolved path if found, or ToolInfo with error_message if not
    """
    cache_key = "find_clang_tidy"
    if cache_key in _tool_cache:
        return _tool_cache[cache_key]

    for cmd in CLANG_TIDY_COMMANDS:
        logger.debug("Trying %s...", cmd)
        resolved = shutil.which(cmd)
        if resolved:
            logger.debug("Found %s at %s", cmd, resolved)
            tool_info = ToolInfo(command=cmd, full_command=resolved)
            _tool_cache[cache_key] = tool_info
            return tool_info
        logger.debug("%s not found", cmd)

    tool_info = ToolInfo(command=None, full_command=None, error_message=f"not in PATH (tried: {', '.join(CLANG_TIDY_COMMANDS)})")
    logger.debug("clang-tidy %s", tool_info.error_message)
    _tool_cache[cache_key] = tool_info
    return tool_info


def get_tool_version(command: str) -> Optional[str]:
    """Return the version line reported by command --version, or None."""
    version_output = _try_command([command])
    if not version_output:
        return None
    return _extract_version(version_output)


def check_all_tools() -> Dict[str, Dict[str, str]]:
    """Check all known tools and return their status.

    Returns:
        Dictionary with tool names as keys, each containing command, path and version.
        Missing tools are omitted from the result.
    """
    tools: Dict[str, Dict[str, str]] = {}

    tool_info = find_clang_tidy()
    if tool_info.is_found():
        assert tool_info.command is not None and tool_info.full_command is not None  # For type checker
        tools["clang-tidy"] = {
            "command": tool_info.command,
            "path": tool_info.full_command,
            "version": get_tool_version(tool_info.full_command) or "unknown",
        }

    return tools


def main() -> int:
    """Main entry point for CLI usage.

    Returns:
        Exit code: 0 if tool found (or check-all succeeds), 1 if not found
    """
    parser = argparse.ArgumentParser(description="Detect external tools for x-clang-tidy", formatter_class=argparse.RawDescriptionHelpFormatter)

    parser.add_argument("--find-clang-tidy", action="store_true", help="Find clang-tidy command")
    parser.add_argument("--check-all", action="store_true", help="Check all tools and output JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose debug logging")

    args = parser.parse_args()

    # Configure logging
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", stream=sys.stderr)
    else:
        logging.basicConfig(level=logging.WARNING)

    if args.check_all:
        print(json.dumps({"tools": check_all_tools()}, indent=2))
        return 0

    if args.find_clang_tidy:
        tool_info = find_clang_tidy()
        if tool_info.is_found():
            print(tool_info.full_command)
            return 0
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
