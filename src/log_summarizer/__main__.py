"""Module entrypoint.

Allows:
    python -m log_summarizer
"""

from __future__ import annotations

from log_summarizer.server.log_server import main

if __name__ == "__main__":
    main()
