"""Input loading, validation and output paths."""
