#!/usr/bin/env python
"""
Task Assistant - Startup Script

Starts the interactive console with configuration from .env / environment.

Usage:
    python start_assistant.py
    python start_assistant.py --provider anthropic
    python start_assistant.py --env-file ./config/.env --model gemini-2.5-pro
"""

import sys

from ui.console import main

if __name__ == "__main__":
    sys.exit(main())
