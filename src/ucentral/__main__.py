"""
uCentral CLI entry point.

Usage:
    python -m ucentral listdevices
    python -m ucentral getdevice aabbccddeeff interfaces
"""

from ucentral.cli import main

if __name__ == "__main__":
    main()
