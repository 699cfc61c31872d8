"""Test suite for forest plot data preparation.

Unit tests cover record normalization, weight scaling, table text,
axis ticks, validation and assembly; integration tests cover file
loading and the CLI. Run ``pytest`` from the project root.
"""
