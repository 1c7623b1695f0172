"""Experience booking marketplace API."""
