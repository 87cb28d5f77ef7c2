#!/usr/bin/env python3
"""Tests for xclangtidy/argument_utils.py"""

import pytest

from xclangtidy.argument_utils import assemble_arguments, filter_arguments, is_filtered
from xclangtidy.config_utils import Configuration


class TestFilterArguments:
    """Tests for filter_arguments and is_filtered."""

    @pytest.mark.unit
    def test_no_filters_keeps_everything(self) -> None:
        """Test empty filter list returns the input unchanged and in order."""
        args = ["-p", "build", "--checks=-*,bugprone-*", "src/b.cpp", "src/a.cpp"]
        assert filter_arguments(args, []) == args

    @pytest.mark.unit
    def test_prefix_drops_family(self) -> None:
        """Test one prefix drops every variant sharing it."""
        args = ["-specs=nano.specs", "-specs=nosys.specs", "src/main.cpp"]
        assert filter_arguments(args, ["-specs="]) == ["src/main.cpp"]

    @pytest.mark.unit
    def test_exact_match_dropped(self) -> None:
        assert filter_arguments(["-mthumb-interwork", "main.c"], ["-mthumb-interwork"]) == ["main.c"]

    @pytest.mark.unit
    def test_case_sensitive(self) -> None:
        """Test matching does not ignore case."""
        assert filter_arguments(["-Specs=nano.specs"], ["-specs="]) == ["-Specs=nano.specs"]

    @pytest.mark.unit
    def test_no_wildcards(self) -> None:
        """Test filter entries are literal text."""
        assert filter_arguments(["-mcpu=cortex-m4", "-m*"], ["-m*"]) == ["-mcpu=cortex-m4"]

    @pytest.mark.unit
    def test_filter_is_prefix_not_substring(self) -> None:
        """Test an entry matching in the middle does not filter."""
        assert filter_arguments(["--extra=-specs=x"], ["-specs="]) == ["--extra=-specs=x"]

    @pytest.mark.unit
    def test_kept_iff_no_prefix_matches(self) -> None:
        """Test every argument is kept exactly when no filter entry prefixes it."""
        filters = ["-specs=", "-fstack-usage", "-Wl,"]
        args = ["-specs=nano.specs", "-fstack-usage", "-fstack", "-Wl,--gc-sections", "-Wall", "main.c", "-fstack-usage-extra"]
        result = filter_arguments(args, filters)
        for arg in args:
            assert (arg in result) == (not any(arg.startswith(f) for f in filters))
        assert result == ["-fstack", "-Wall", "main.c"]

    @pytest.mark.unit
    def test_is_filtered(self) -> None:
        assert is_filtered("-specs=nano.specs", ["-x", "-specs="])
        assert not is_filtered("main.c", ["-x", "-specs="])


class TestAssembleArguments:
    """Tests for assemble_arguments function."""

    @pytest.mark.unit
    def test_embedded_scenario(self) -> None:
        """Test the arm-none-eabi scenario with a filtered -specs= flag."""
        config = Configuration(extra_args=("--target=arm-none-eabi",), filter_args=("-specs=",))
        result = assemble_arguments(config, ["/usr/inc1", "/usr/inc2"], ["-specs=nano.specs", "src/main.cpp"])
        assert result == [
            "-extra-arg=--target=arm-none-eabi",
            "-extra-arg=-I/usr/inc1",
            "-extra-arg=-I/usr/inc2",
            "src/main.cpp",
        ]

    @pytest.mark.unit
    def test_order_extra_then_includes_then_forwarded(self) -> None:
        """Test the three sections appear in fixed order."""
        config = Configuration(extra_args=("-DB", "-DA"))
        result = assemble_arguments(config, ["/inc"], ["-p", "build", "a.c"])
        assert result == ["-extra-arg=-DB", "-extra-arg=-DA", "-extra-arg=-I/inc", "-p", "build", "a.c"]

    @pytest.mark.unit
    def test_filters_only_forwarded_section(self) -> None:
        """Test filter entries never remove config extra-args or include paths."""
        config = Configuration(extra_args=("-specs=keep",), filter_args=("-extra-arg=", "-specs="))
        result = assemble_arguments(config, ["/inc"], ["-specs=drop", "-extra-arg=-DDROP", "a.c"])
        assert result == ["-extra-arg=-specs=keep", "-extra-arg=-I/inc", "a.c"]

    @pytest.mark.unit
    def test_empty_inputs(self) -> None:
        """Test all-empty inputs give an empty vector."""
        assert assemble_arguments(Configuration(), [], []) == []

    @pytest.mark.unit
    def test_tool_path_not_included(self) -> None:
        """Test the clang-tidy path is not part of the argument vector."""
        config = Configuration(tool_path="/opt/llvm/bin/clang-tidy")
        assert assemble_arguments(config, [], ["a.c"]) == ["a.c"]

    @pytest.mark.unit
    def test_deterministic(self) -> None:
        """Test repeated calls produce identical output and do not mutate inputs."""
        config = Configuration(extra_args=("-DA",), filter_args=("-specs=",))
        includes = ["/inc1", "/inc2"]
        forwarded = ["-specs=nano.specs", "a.c"]
        first = assemble_arguments(config, includes, forwarded)
        second = assemble_arguments(config, includes, forwarded)
        assert first == second
        assert includes == ["/inc1", "/inc2"]
        assert forwarded == ["-specs=nano.specs", "a.c"]
