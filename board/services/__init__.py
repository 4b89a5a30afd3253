"""Domain services for the board core."""
