"""Discussion board back end."""
