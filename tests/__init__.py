"""Tests for the forest fire cellular automaton."""
