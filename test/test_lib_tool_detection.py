#!/usr/bin/env python3
"""Tests for xclangtidy/tool_detection.py"""

import json
import sys
from typing import Any, List, Optional
from unittest.mock import MagicMock, Mock
import pytest

from xclangtidy.tool_detection import (
    CLANG_TIDY_COMMANDS,
    ToolInfo,
    _extract_version,
    _tool_cache,
    check_all_tools,
    clear_cache,
    find_clang_tidy,
    get_tool_version,
    main,
)


class TestToolInfo:
    """Tests for ToolInfo dataclass."""

    def test_is_found_with_command(self) -> None:
        """Test is_found returns True when command is set."""
        assert ToolInfo(command="clang-tidy", full_command="/usr/bin/clang-tidy").is_found() is True

    def test_is_found_without_command(self) -> None:
        """Test is_found returns False when command is None."""
        tool_info = ToolInfo(command=None, full_command=None, error_message="not in PATH")
        assert tool_info.is_found() is False
        assert tool_info.error_message == "not in PATH"


class TestConstants:
    """Tests for exported command constants."""

    def test_clang_tidy_commands(self) -> None:
        """Test the unversioned name is tried first."""
        assert CLANG_TIDY_COMMANDS == ["clang-tidy", "clang-tidy-20", "clang-tidy-19", "clang-tidy-18"]


class TestFindClangTidy:
    """Tests for find_clang_tidy function."""

    def test_found_unversioned(self, monkeypatch: Any) -> None:
        """Test clang-tidy on PATH is preferred."""
        monkeypatch.setattr("shutil.which", lambda x: f"/usr/bin/{x}")
        tool_info = find_clang_tidy()
        assert tool_info.command == "clang-tidy"
        assert tool_info.full_command == "/usr/bin/clang-tidy"

    def test_fallback_to_versioned(self, monkeypatch: Any) -> None:
        """Test versioned names are tried when clang-tidy is missing."""

        def which(cmd: str) -> Optional[str]:
            return "/usr/lib/llvm-19/bin/clang-tidy" if cmd == "clang-tidy-19" else None

        monkeypatch.setattr("shutil.which", which)
        tool_info = find_clang_tidy()
        assert tool_info.command == "clang-tidy-19"
        assert tool_info.full_command == "/usr/lib/llvm-19/bin/clang-tidy"

    def test_not_found(self, monkeypatch: Any) -> None:
        """Test the error message lists every tried command."""
        monkeypatch.setattr("shutil.which", lambda x: None)
        tool_info = find_clang_tidy()
        assert not tool_info.is_found()
        assert tool_info.error_message is not None
        assert "tried:" in tool_info.error_message
        assert "clang-tidy-18" in tool_info.error_message

    def test_uses_cache(self, monkeypatch: Any) -> None:
        """Test the second call does not search PATH again."""
        mock_which = Mock(return_value="/usr/bin/clang-tidy")
        monkeypatch.setattr("shutil.which", mock_which)
        first = find_clang_tidy()
        second = find_clang_tidy()
        assert mock_which.call_count == 1
        assert second is first

    def test_clear_cache(self) -> None:
        """Test clear_cache empties the cache."""
        _tool_cache["test_key"] = ToolInfo(command="test", full_command="test")
        clear_cache()
        assert len(_tool_cache) == 0


class TestVersion:
    """Tests for version extraction."""

    def test_extract_version_skips_banner(self) -> None:
        """Test the LLVM banner line is skipped."""
        output = "LLVM (http://llvm.org/):\n  LLVM version 19.1.7\n  Optimized build.\n"
        assert _extract_version(output) == "LLVM version 19.1.7"

    def test_extract_version_first_line_fallback(self) -> None:
        assert _extract_version("tidy 1.0\nsecond") == "tidy 1.0"

    def test_get_tool_version(self, monkeypatch: Any) -> None:
        """Test get_tool_version runs --version."""
        calls: List[List[str]] = []

        def mock_run(cmd: List[str], **kwargs: Any) -> MagicMock:
            calls.append(cmd)
            return MagicMock(stdout="Ubuntu LLVM version 18.1.3\n")

        monkeypatch.setattr("subprocess.run", mock_run)
        assert get_tool_version("clang-tidy-18") == "Ubuntu LLVM version 18.1.3"
        assert calls == [["clang-tidy-18", "--version"]]

    def test_get_tool_version_failure(self, monkeypatch: Any) -> None:
        monkeypatch.setattr("subprocess.run", Mock(side_effect=FileNotFoundError()))
        assert get_tool_version("clang-tidy") is None


class TestCli:
    """Tests for check_all_tools and main."""

    def test_check_all_tools_found(self, monkeypatch: Any) -> None:
        monkeypatch.setattr("shutil.which", lambda x: f"/usr/bin/{x}")
        monkeypatch.setattr("subprocess.run", Mock(return_value=MagicMock(stdout="LLVM version 19.1.7")))
        tools = check_all_tools()
        assert tools == {"clang-tidy": {"command": "clang-tidy", "path": "/usr/bin/clang-tidy", "version": "LLVM version 19.1.7"}}

    def test_check_all_tools_missing(self, monkeypatch: Any) -> None:
        monkeypatch.setattr("shutil.which", lambda x: None)
        assert check_all_tools() == {}

    def test_main_find(self, monkeypatch: Any, capsys: Any) -> None:
        """Test --find-clang-tidy prints the resolved path."""
        monkeypatch.setattr("shutil.which", lambda x: f"/usr/bin/{x}")
        monkeypatch.setattr(sys, "argv", ["tool_detection", "--find-clang-tidy"])
        assert main() == 0
        assert capsys.readouterr().out.strip() == "/usr/bin/clang-tidy"

    def test_main_find_missing(self, monkeypatch: Any, capsys: Any) -> None:
        monkeypatch.setattr("shutil.which", lambda x: None)
        monkeypatch.setattr(sys, "argv", ["tool_detection", "--find-clang-tidy"])
        assert main() == 1
        assert capsys.readouterr().out == ""

    def test_main_check_all(self, monkeypatch: Any, capsys: Any) -> None:
        monkeypatch.setattr("shutil.which", lambda x: None)
        monkeypatch.setattr(sys, "argv", ["tool_detection", "--check-all"])
        assert main() == 0
        assert json.loads(capsys.readouterr().out) == {"tools": {}}
