#!/usr/bin/env python3
"""Pomodori — entry point.

Run with:
    python main.py
    python -m pomodori
"""

from pomodori.__main__ import main


if __name__ == "__main__":
    main()
