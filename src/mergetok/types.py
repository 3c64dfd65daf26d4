"""
Core types for tokenization.
"""

from typing_extensions import TypeAliasType

# a vocabulary text: str for char-granular vocabs, bytes for byte-granular
Piece = TypeAliasType("Piece", str | bytes)
TokenId = TypeAliasType("TokenId", int)
Score = TypeAliasType("Score", float)
# stable node identifier inside a SymbolSequence
Handle = TypeAliasType("Handle", int)
