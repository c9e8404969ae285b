"""Test utilities: in-memory stores, a fake push provider and record factories."""
