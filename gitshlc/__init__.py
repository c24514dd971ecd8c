# -*- coding: utf-8 -*-
"""
GitSHLC
Drive git pull/push/merge and repository setup against a local working
tree or one reachable over ssh.
"""

__version__ = "0.3.0"
