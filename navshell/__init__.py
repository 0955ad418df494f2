"""
NavShell: a persistent-feeling shell session on top of one-shot commands.
"""

__version__ = "0.1.0"
