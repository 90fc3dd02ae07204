"""Test suite for the MSGA backend."""
