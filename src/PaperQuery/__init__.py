"""PaperQuery: OpenAlex and Zotero queries from the terminal and over MCP."""

__version__ = "0.1.0"
