"""Application layer - Use cases over the order summary repository."""
