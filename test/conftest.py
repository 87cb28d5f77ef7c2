#!/usr/bin/env python3
#****************************************************************************************************************************************************
#* BSD 3-Clause License
#*
#* Copyright (c) 2025, Mana Battery
#* All rights reserved.
#*
#* Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
#*
#* 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
#* 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
#*    documentation and/or other materials provided with the distribution.
#* 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
#*    software without specific prior written permission.
#*
#* THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
#* THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
#* CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
#* PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
#* LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
#* EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""Pytest configuration and shared fixtures for x-clang-tidy tests.

No test starts a real compiler or clang-tidy: process interaction goes
through FakeRunner, which records every command and returns canned output.
"""

import sys
from pathlib import Path
from typing import Iterable, List, Optional
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from xclangtidy.process_utils import ProcessResult, ProcessRunner
from xclangtidy import tool_detection


def make_gcc_trace(include_dirs: Iterable[str], quote_dirs: Iterable[str] = ()) -> str:
    """Create stderr text shaped like 'arm-none-eabi-gcc -xc -E -v -'.

    Helper function (not a fixture) so tests can build traces with any directories.
    """
    lines = [
        "Using built-in specs.",
        "COLLECT_GCC=arm-none-eabi-gcc",
        "Target: arm-none-eabi",
        "gcc version 13.2.1 20231009 (Arm GNU Toolchain 13.2.rel1 (Build arm-13.7))",
        ' /opt/arm/libexec/gcc/arm-none-eabi/13.2.1/cc1 -E -quiet -v -D__USES_INITFINI__ - -mcpu=arm7tdmi -mfloat-abi=soft -marm -march=armv4t',
        "ignoring nonexistent directory \"/opt/arm/arm-none-eabi/usr/local/include\"",
        '#include "..." search starts here:',
    ]
    lines.extend(f" {d}" for d in quote_dirs)
    lines.append("#include <...> search starts here:")
    lines.extend(f" {d}" for d in include_dirs)
    lines.append("End of search list.")
    lines.append("COMPILER_PATH=/opt/arm/libexec/gcc/arm-none-eabi/13.2.1/")
    return "\n".join(lines) + "\n"


class FakeRunner(ProcessRunner):
    """ProcessRunner double with canned results.

    Attributes:
        captured: argv of every capture() call
        executed: argv of every run() call
    """

    def __init__(
        self,
        stderr: str = "",
        exit_code: int = 0,
        capture_error: Optional[OSError] = None,
        run_exit_code: int = 0,
        run_error: Optional[OSError] = None,
    ):
        self.stderr = stderr
        self.exit_code = exit_code
        self.capture_error = capture_error
        self.run_exit_code = run_exit_code
        self.run_error = run_error
        self.captured: List[List[str]] = []
        self.executed: List[List[str]] = []

    def capture(self, argv: List[str], stdin_data: Optional[str] = None) -> ProcessResult:
        self.captured.append(list(argv))
        if self.capture_error is not None:
            raise self.capture_error
        return ProcessResult(stdout="", stderr=self.stderr, exit_code=self.exit_code)

    def run(self, argv: List[str]) -> int:
        self.executed.append(list(argv))
        if self.run_error is not None:
            raise self.run_error
        return self.run_exit_code


@pytest.fixture
def arm_trace() -> str:
    """Trace listing the usual arm-none-eabi C++ include directories."""
    return make_gcc_trace(
        [
            "/opt/arm/arm-none-eabi/include/c++/13.2.1",
            "/opt/arm/arm-none-eabi/include/c++/13.2.1/arm-none-eabi",
            "/opt/arm/lib/gcc/arm-none-eabi/13.2.1/include",
            "/opt/arm/arm-none-eabi/include",
        ]
    )


@pytest.fixture
def fake_runner(arm_trace: str) -> FakeRunner:
    return FakeRunner(stderr=arm_trace)


@pytest.fixture(autouse=True)
def clean_tool_cache() -> Iterable[None]:
    """Keep clang-tidy detection results from leaking between tests."""
    tool_detection.clear_cache()
    yield
    tool_detection.clear_cache()


@pytest.fixture
def work_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside an empty directory so no default config is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
