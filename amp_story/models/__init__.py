"""
Data Models
===========

Pydantic models for story documents and loader results.
"""
