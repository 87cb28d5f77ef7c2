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
"""Assembly of the clang-tidy argument vector."""

import logging
from typing import List, Sequence

from .config_utils import Configuration
from .constants import EXTRA_ARG_PREFIX, INCLUDE_FLAG

logger = logging.getLogger(__name__)


def is_filtered(arg: str, filter_args: Sequence[str]) -> bool:
    """Check if arg equals or starts with any filter entry (case-sensitive)."""
    return any(arg.startswith(prefix) for prefix in filter_args)


def filter_arguments(args: Sequence[str], filter_args: Sequence[str]) -> List[str]:
    """Drop every argument matched by filter_args, keeping the order of the rest.

    Args:
        args: Arguments forwarded from the caller
        filter_args: Literal prefixes; '-specs=' drops every '-specs=...' variant

    Returns:
        Remaining arguments in their original order
    """
    kept: List[str] = []
    for arg in args:
        if is_filtered(arg, filter_args):
            logger.debug("Filtering argument: %s", arg)
            continue
        kept.append(arg)
    return kept


def extra_arg(value: str) -> str:
    return f"{EXTRA_ARG_PREFIX}{value}"


def assemble_arguments(config: Configuration, include_paths: Sequence[str], forwarded: Sequence[str]) -> List[str]:
    """Build the clang-tidy argument vector (without the program itself).

    Order is fixed: config extra-args, then one -I per implicit include
    directory, then the forwarded arguments that survive filtering. The
    result depends only on the inputs.

    Args:
        config: Parsed configuration
        include_paths: Compiler include directories in search order
        forwarded: Caller arguments after the compiler (and config) path

    Returns:
        Argument vector for clang-tidy
    """
    arguments = [extra_arg(value) for value in config.extra_args]
    arguments.extend(extra_arg(f"{INCLUDE_FLAG}{path}") for path in include_paths)
    arguments.extend(filter_arguments(forwarded, config.filter_args))
    return arguments
