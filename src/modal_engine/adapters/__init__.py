"""Host adapters for the editing engine."""
