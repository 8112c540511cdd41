"""HTTP surface for presentation collaborators."""
