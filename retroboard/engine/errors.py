from __future__ import annotations


class ParseFenError(ValueError):
    """Raised when a board placement or FEN field cannot be parsed."""


class ParseRetroPocketError(ValueError):
    """Raised when a pocket descriptor such as ``"PPNQ2"`` is malformed."""


class ParseRetroUciError(ValueError):
    """Raised when a retro UCI string such as ``"UNe8d7"`` is malformed."""


class RetroInvariantError(RuntimeError):
    """Raised when the core is handed an unmove it could never have generated.

    This signals a logic defect in the caller (pushing an unmove from an empty
    square, uncapturing a piece the pocket does not hold, uncapturing a king),
    not bad input data, so it deliberately does not derive from ``ValueError``.
    """
