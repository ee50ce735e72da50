"""
IsThereAnyDeal ingestion: API contracts, extractors, resolver and
the refresh orchestrator.
"""
