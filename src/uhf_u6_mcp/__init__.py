"""Control a Fongwah UHF-U6 USB RFID reader and expose it over MCP."""

__version__ = "0.1.0"
