"""Domain core: review ladder and list views."""
