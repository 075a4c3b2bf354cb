"""Host adapters for the edit engine."""
