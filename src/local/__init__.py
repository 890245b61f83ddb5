"""Local version store and project configuration discovery."""
