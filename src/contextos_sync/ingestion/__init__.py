"""
Ingestion: vault walking, front-matter parsing, routing, record shaping
and the sync orchestrator that ties them to a record store.
"""
