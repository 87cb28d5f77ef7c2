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
"""Subprocess access for x-clang-tidy.

All process interaction goes through ProcessRunner so the compiler probe and
the final clang-tidy execution can be exercised in tests with a fake runner
returning canned output. Spawn failures (missing binary, permission denied)
propagate as OSError; callers translate them into the stage-specific errors
from constants.py.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Captured output of a finished process.

    Attributes:
        stdout: Decoded standard output
        stderr: Decoded standard error
        exit_code: Process exit status
    """

    stdout: str
    stderr: str
    exit_code: int


class ProcessRunner:
    """Blocking subprocess runner. No timeouts: a hung child hangs the caller."""

    def capture(self, argv: List[str], stdin_data: Optional[str] = None) -> ProcessResult:
        """Run argv to completion and capture its output.

        Args:
            argv: Program and arguments
            stdin_data: Text fed to stdin; None connects stdin to the null device

        Returns:
            ProcessResult with undecodable bytes replaced

        Raises:
            OSError: If the program cannot be started
        """
        logger.debug("Running: %s", subprocess.list2cmdline(argv))
        result = subprocess.run(
            argv,
            input=stdin_data,
            stdin=subprocess.DEVNULL if stdin_data is None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        return ProcessResult(stdout=result.stdout, stderr=result.stderr, exit_code=result.returncode)

    def run(self, argv: List[str]) -> int:
        """Run argv with inherited stdin/stdout/stderr and return its exit status.

        Raises:
            OSError: If the program cannot be started
        """
        logger.debug("Executing: %s", subprocess.list2cmdline(argv))
        return subprocess.run(argv, check=False).returncode
