"""
Shared helpers: the transfer codec, output path rules, and display formatting.
"""
