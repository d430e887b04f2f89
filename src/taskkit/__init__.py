"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

taskkit: AI-assisted task and template kit runtime.
"""

__version__ = "0.1.0"
