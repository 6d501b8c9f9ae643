"""File transfer engine adapters."""
