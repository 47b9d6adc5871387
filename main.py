#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--size {small,medium,large}]
    python main.py scores
    python main.py serve [--host HOST] [--port PORT]
"""
from minesweeper.cli import main


if __name__ == "__main__":
    main()
