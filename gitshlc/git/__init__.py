# -*- coding: utf-8 -*-
"""
GitSHLC Git Module
Process execution, quoting, local/remote backends and ref listing
"""

from . import executor
from . import quoting
from . import backend

__all__ = [
    "executor",
    "quoting",
    "backend",
]
