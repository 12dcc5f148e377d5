"""Plain data types shared across huskymod (action kinds and requests)."""
