"""Explorer metadata ingestion, normalization and compilation."""
