"""Ingestion pipeline: source client -> normalize -> resolve company -> upsert."""
