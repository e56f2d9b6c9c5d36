"""Nucleotide sequence helpers."""

COMPLEMENTS = {
    "A": "T", "T": "A", "C": "G", "G": "C", "N": "N",
    "R": "Y", "Y": "R", "S": "S", "W": "W", "K": "M", "M": "K",
    "B": "V", "V": "B", "D": "H", "H": "D",
}
COMPLEMENTS.update({k.lower(): v.lower() for k, v in COMPLEMENTS.items()})


def complement_base(base: str) -> str:
    """Return the complement of a single nucleotide, preserving case."""
    return COMPLEMENTS.get(base, base)


def reverse_complement(bases: str) -> str:
    """Reverse complement a nucleotide string.

    IUPAC ambiguity codes are complemented; anything else (e.g. '*', '.')
    is carried through unchanged.
    """
    return "".join(complement_base(b) for b in reversed(bases))
