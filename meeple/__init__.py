#!/usr/bin/env python

"""
    Meeple, a board-game lending tracker

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

__version__ = "0.1.0"
