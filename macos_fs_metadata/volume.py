#!/usr/bin/env python3
"""
Volume enumeration.

`all_volumes` is the host volume query under its public name.
"""

from __future__ import annotations

# local repo modules
from .host import volume_information

all_volumes = volume_information

__all__ = ["all_volumes"]
