"""
hdf-converters Test Suite

Test Organization:
- test_mapping/ - Path resolution, mapping nodes, tree walker
- test_converters/ - BaseConverter, hashing, TruffleHog converter
- test_xml/ - defusedxml adapter and checklist schema
- test_ckl/ - Checklist construction, field transformers, HDF assembly
- test_data/ - CCI → NIST reference table
- test_core/ - Configuration, constants, logging, summary
- test_io/ - File operations
- test_cli/ - Command-line interface

Running Tests:
    # All tests
    python -m pytest tests/ -v

    # Specific module
    python -m pytest tests/test_ckl/ -v
"""

__all__ = []
