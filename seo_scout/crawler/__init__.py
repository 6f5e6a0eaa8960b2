"""Crawl engine: URL normalisation, frontier, fetching, link discovery, orchestration."""
