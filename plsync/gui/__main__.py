"""Entry point for the GUI application.

Usage:
    python -m plsync.gui PLAYLIST_ID
"""

import sys

if __name__ == "__main__":
    from plsync.gui.app import main

    if len(sys.argv) != 2:
        sys.exit("usage: python -m plsync.gui PLAYLIST_ID")
    sys.exit(main(sys.argv[1]))
