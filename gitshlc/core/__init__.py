# -*- coding: utf-8 -*-
"""
GitSHLC Core Module
Logging, error taxonomy, settings and background jobs
"""

from . import log
from . import result
from . import settings

__all__ = [
    "log",
    "result",
    "settings",
]
