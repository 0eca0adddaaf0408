"""Domain services: company resolution, merges, catalog, admin gate."""
