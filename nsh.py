"""
Entry point script for NavShell.
Allows running with: python nsh.py
"""

from navshell.main import app

if __name__ == "__main__":
    app()
