"""Core logic for the JSON Mock Designer.

The Gradio UI lives in `app.py`. This package contains the mock-data engine:
- the schema data model
- name-based field type detection and synthetic values
- schema -> mock JSON generation
- example JSON -> schema parsing
- two-way form/editor synchronization
"""
