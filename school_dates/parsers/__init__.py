"""
Parsers layer - HTML to dated candidates.

- blocks: HTML -> ordered heading/row/text blocks
- interpreter: blocks -> (label, date text, academic year, term)
"""

from .blocks import BlockCollector, collect_blocks
from .interpreter import InterpreterState, interpret_blocks, step

__all__ = [
    "BlockCollector",
    "collect_blocks",
    "InterpreterState",
    "interpret_blocks",
    "step",
]
