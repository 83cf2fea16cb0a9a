"""Infrastructure layer - State store clients, repository adapter and wiring."""
