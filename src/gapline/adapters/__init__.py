"""Host adapters that drive a line editor from a UI toolkit."""
