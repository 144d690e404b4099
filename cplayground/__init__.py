"""
CPlayground - Credential Subsystem (Educational Version)

The user accounts behind the CPlayground learning platform.

Key Features:
- From-scratch SHA-256: every round visible, no hashlib
- Plain-text user file: one line per user, easy to inspect
- Atomic saves: a crash mid-write never truncates the file
- Usage statistics: games played/won, quizzes passed, last login

Components:
- digest.py: SHA-256 engine (init / absorb / finalize / hex)
- store.py: User file parsing, atomic save, lookup
- auth.py: Signup, login, statistics, session state
- config.py: Paths and log level from the environment

Usage:
    python cplayground_main.py                      # Interactive menu
    python demo.py                                  # Guided walkthrough
    python test_simple.py                           # Self-tests
"""

__version__ = "0.1.0"
__author__ = "CPlayground Team"
