"""Scoring components: alignment, feedback, performance and lyrics."""
