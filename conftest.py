"""
Test session configuration.

Keeps the repository root importable so test modules can import the package
as ``src.tapegrad`` without installing it.
"""
