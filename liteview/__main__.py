#!/usr/bin/env python3
"""
LiteView - Entry point script

Run the REPL:
    python -m liteview -f app.db

Serve the web viewer:
    python -m liteview --web

Or use as a library:
    from liteview import Session
    session = Session()
    session.load_from_bytes(data)
    session.execute("SELECT 1 + 1")
"""

import sys

from liteview.core.repl import main

if __name__ == '__main__':
    sys.exit(main())
