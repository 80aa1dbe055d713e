"""
Core Business Logic
==================

Core modules for story loading and rendering.

Modules:
- dsl: Story loading, validation, and conversion to models
- rendering: Tag rendering, element dispatch, and document assembly
"""
