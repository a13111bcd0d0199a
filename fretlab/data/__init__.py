"""
Data Subpackage

This package holds the engine's value types and its data tables:
    - schema.py: Pydantic models (Note, ChordSymbol, Voicing, ...)
    - loader.py: YAML loading and validation, engine settings
    - shapes.yaml: Movable chord shapes and CAGED shapes
    - progressions.yaml: Common progressions and jam suggestions
    - defaults.yaml: Engine defaults
"""

from fretlab.data.schema import ChordSymbol, Key, Note, Quality, Voicing
