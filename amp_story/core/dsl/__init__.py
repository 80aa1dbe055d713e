"""
Story Loading Module
====================

JSON and YAML story loading, validation, and conversion.

Components:
- parser: Format detection, Cerberus validation, model conversion
"""
