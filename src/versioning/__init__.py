"""Version models, pin parsing and best-match selection."""
