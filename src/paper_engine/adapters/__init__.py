"""Host adapters for presenting a paper."""
