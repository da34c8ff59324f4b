"""quake-map - interactive earthquake map with live and stored event sources."""

__version__ = "1.0.0"
