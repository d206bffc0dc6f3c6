"""ztr - zettelkasten note creation"""

__version__ = "0.1.0"
