"""
A_core: Domain models, interfaces, logging and exceptions.

Core abstractions for the BOM extraction pipeline including:
- Pydantic models for the canonical CompatibilityTable
- Parser output container and parser/fetcher interfaces
- Centralized logging configuration
- Exception hierarchy
"""
