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
"""Configuration loading for x-clang-tidy.

The configuration is a JSON object with three optional keys::

    {
        "clang-tidy": "/opt/llvm/bin/clang-tidy",
        "extra-args": ["--target=arm-none-eabi", "-D__ARM_ARCH_7M__"],
        "filter-args": ["-specs=", "-mthumb-interwork"]
    }

``*.json`` files are parsed as-is. ``*.json.hbt`` files are first expanded
with template_utils.resolve_template so values can come from the environment.
"""

import os
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .constants import (
    CONFIG_KEY_CLANG_TIDY,
    CONFIG_KEY_EXTRA_ARGS,
    CONFIG_KEY_FILTER_ARGS,
    DEFAULT_CONFIG_FILES,
    PLAIN_CONFIG_SUFFIX,
    TEMPLATED_CONFIG_SUFFIX,
    ConfigParseError,
    ConfigReadError,
)
from .template_utils import EnvLookup, resolve_template

logger = logging.getLogger(__name__)

KNOWN_KEYS = (CONFIG_KEY_CLANG_TIDY, CONFIG_KEY_EXTRA_ARGS, CONFIG_KEY_FILTER_ARGS)


@dataclass(frozen=True)
class Configuration:
    """Adapter configuration.

    Attributes:
        tool_path: Path to clang-tidy; None means search PATH
        extra_args: Values passed to clang-tidy as -extra-arg=<value>, in order
        filter_args: Prefixes of forwarded arguments that are dropped
    """

    tool_path: Optional[str] = None
    extra_args: Tuple[str, ...] = field(default_factory=tuple)
    filter_args: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON form accepted by parse_config."""
        data: Dict[str, Any] = {}
        if self.tool_path is not None:
            data[CONFIG_KEY_CLANG_TIDY] = self.tool_path
        data[CONFIG_KEY_EXTRA_ARGS] = list(self.extra_args)
        data[CONFIG_KEY_FILTER_ARGS] = list(self.filter_args)
        return data


def is_templated_config(path: str) -> bool:
    return path.endswith(TEMPLATED_CONFIG_SUFFIX)


def has_config_suffix(path: str) -> bool:
    """Check if a file name follows the plain or templated config naming."""
    return path.endswith(PLAIN_CONFIG_SUFFIX) or path.endswith(TEMPLATED_CONFIG_SUFFIX)


def is_config_path(path: str) -> bool:
    """Check if path names a readable configuration file.

    A file that exists but does not carry a config suffix is not a config.

    Args:
        path: Candidate path (usually a command line argument)

    Returns:
        True if path has a config suffix and is a readable regular file
    """
    if not has_config_suffix(path):
        return False
    return os.path.isfile(path) and os.access(path, os.R_OK)


def find_default_config(directory: str = ".") -> Optional[str]:
    """Find the default configuration file in directory.

    Args:
        directory: Directory to search (default: current directory)

    Returns:
        Path of the first existing file from DEFAULT_CONFIG_FILES, or None
    """
    for name in DEFAULT_CONFIG_FILES:
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate):
            logger.debug("Found default config: %s", candidate)
            return candidate
    logger.debug("No default config in %s (tried: %s)", os.path.abspath(directory), ", ".join(DEFAULT_CONFIG_FILES))
    return None


def _string_list(data: Dict[str, Any], key: str, source: str) -> Tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigParseError(f"{source}: '{key}' must be an array of strings, got {type(value).__name__}")
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise ConfigParseError(f"{source}: '{key}'[{index}] must be a string, got {type(item).__name__}")
    return tuple(value)


def parse_config(text: str, source: str = "<config>") -> Configuration:
    """Parse configuration text into a Configuration.

    Args:
        text: JSON text (already template-resolved if templated)
        source: Name used in error messages

    Returns:
        Parsed Configuration with missing keys defaulted

    Raises:
        ConfigParseError: If the text is not a JSON object or a key has the wrong type
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"{source}: invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e

    if not isinstance(data, dict):
        raise ConfigParseError(f"{source}: top-level value must be an object, got {type(data).__name__}")

    for key in data:
        if key not in KNOWN_KEYS:
            logger.debug("%s: ignoring unknown key '%s'", source, key)

    tool_path = data.get(CONFIG_KEY_CLANG_TIDY)
    if tool_path is not None and not isinstance(tool_path, str):
        raise ConfigParseError(f"{source}: '{CONFIG_KEY_CLANG_TIDY}' must be a string, got {type(tool_path).__name__}")

    filter_args = _string_list(data, CONFIG_KEY_FILTER_ARGS, source)
    if "" in filter_args:
        logger.warning("%s: empty entry in '%s' filters out every forwarded argument", source, CONFIG_KEY_FILTER_ARGS)

    return Configuration(
        tool_path=tool_path,
        extra_args=_string_list(data, CONFIG_KEY_EXTRA_ARGS, source),
        filter_args=filter_args,
    )


def load_config(path: str, lookup: EnvLookup = os.environ.get) -> Configuration:
    """Read, template-expand (for *.json.hbt) and parse a configuration file.

    Args:
        path: Configuration file path
        lookup: Environment lookup used for template expressions

    Returns:
        Parsed Configuration

    Raises:
        ConfigReadError: If the file cannot be read
        ConfigParseError: If the content is malformed
        UndefinedVariableError: If a template references an unset variable
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(f"cannot read '{path}': {e}") from e

    if is_templated_config(path):
        logger.debug("Resolving templates in %s", path)
        text = resolve_template(text, lookup)

    config = parse_config(text, source=path)
    logger.debug("Loaded config %s: %s", path, config)
    return config


def serialize_config(config: Configuration) -> str:
    """Serialize a Configuration to JSON text."""
    return json.dumps(config.to_dict(), indent=2)


def describe_config(config: Configuration) -> List[str]:
    """Return human readable lines describing config (used in verbose output)."""
    return [
        f"clang-tidy: {config.tool_path or '(search PATH)'}",
        f"extra-args: {list(config.extra_args)}",
        f"filter-args: {list(config.filter_args)}",
    ]
