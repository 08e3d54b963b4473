"""
School Dates - term-dates page to calendar document ingestion.

Architecture:
- core/: Stable foundation (models, dates, classifier, IDs, hashing, validation, HTTP client)
- parsers/: HTML to blocks, blocks to dated candidates
- storage/: Key-value stores for the latest document per school
- config/: YAML-driven school definition
- refresher: fetch -> build -> compare -> validate -> commit
- query: read-side helpers over a stored document
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
