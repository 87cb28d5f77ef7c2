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
"""Environment template expansion for templated configuration files.

A templated configuration (``*.json.hbt``) may reference environment variables
with handlebars-style expressions::

    {"clang-tidy": "{{env "LLVM_ROOT"}}/bin/clang-tidy"}

Only the ``env`` helper is supported. Plain ``*.json`` files never go through
this module, so literal ``{{`` and ``}}`` in them are left alone.
"""

import os
import re
import logging
from typing import Callable, Optional

from .constants import UndefinedVariableError

logger = logging.getLogger(__name__)

EnvLookup = Callable[[str], Optional[str]]

# {{env "NAME"}} with optional whitespace inside the braces
RE_ENV_EXPRESSION = re.compile(r'\{\{\s*env\s+"([^"]*)"\s*\}\}')


def resolve_template(text: str, lookup: EnvLookup = os.environ.get) -> str:
    """Replace every {{env "NAME"}} expression with the value of NAME.

    Args:
        text: Raw configuration text
        lookup: Environment lookup returning None for unset names

    Returns:
        Text with all expressions substituted

    Raises:
        UndefinedVariableError: If a referenced variable is not set
    """

    def substitute(match: "re.Match[str]") -> str:
        name = match.group(1)
        value = lookup(name)
        if value is None:
            raise UndefinedVariableError(name)
        logger.debug("Template: %s -> %s", name, value)
        return value

    return RE_ENV_EXPRESSION.sub(substitute, text)
