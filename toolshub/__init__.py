"""ToolsHub: catalog of small online tools with analytics, accounts and a URL shortener."""

__version__ = "1.0.0"
