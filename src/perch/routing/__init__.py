"""Routing — nested route declarations compiled into an ordered route table.

Routes are declared once, flattened into an immutable tuple of
``CompiledRoute``s, and matched in order on every request.
"""
