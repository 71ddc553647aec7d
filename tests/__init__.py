"""
Configurational object query test suite

Structure:
- unit/: Unit tests for individual components (geometry, projector, raster, query)
- integration/: End-to-end rendering of debug images
"""
