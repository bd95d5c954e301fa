"""Test suite for the gogot service."""
