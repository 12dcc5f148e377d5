"""Configuration loading for huskymod (YAML application settings)."""
