"""Variant normalization per vt algorithm (Tan et al., 2015)."""

import logging

from .exceptions import MissingReferenceAlleleError, ReferenceMismatchError
from .models import Allele
from .reference import ReferenceSequence

logger = logging.getLogger(__name__)


def _extension_base(reference: ReferenceSequence, start: int, end: int) -> str:
    # 1-based start: the base left of the allele sits at 0-based start - 2.
    # On the first base of a contig there is nothing to the left, so take
    # the base at 0-based offset `end` instead.
    if start > 1:
        return reference.base_at(start - 2).upper()
    return reference.base_at(end).upper()


def left_align_alleles(
    start: int,
    end: int,
    alleles: list[Allele] | tuple[Allele, ...],
    reference: ReferenceSequence,
) -> tuple[int, int, list[Allele]]:
    """
    Left-align and trim an allele set against the reference.

    Achieves two properties:
    1. Left-alignment: position is leftmost possible
    2. Parsimony: alleles are minimally represented

    Args:
        start: 1-based start of the reference allele
        end: 1-based inclusive end of the reference allele
        alleles: Alleles of the site, exactly one flagged as reference
        reference: Reference contig the interval lies on

    Returns:
        Tuple of (start, end, alleles) with alleles in input order

    Raises:
        MissingReferenceAlleleError: If no allele is flagged as reference
        ReferenceMismatchError: If the reference allele disagrees with the reference
    """
    ref_allele = next((a for a in alleles if a.is_reference), None)
    if ref_allele is None:
        raise MissingReferenceAlleleError([str(a) for a in alleles])

    ref_string = reference.fetch(start - 1, end)
    if ref_string.upper() != ref_allele.bases.upper():
        raise ReferenceMismatchError(
            reference.name, start, end, str(ref_allele), ref_string
        )

    original_start = start
    bases = {allele: allele.bases for allele in alleles}

    changed = True
    while changed:
        changed = False

        if len({b[-1] for b in bases.values()}) == 1 and end > 1:
            bases = {allele: b[:-1] for allele, b in bases.items()}
            end -= 1
            changed = True

        if any(len(b) == 0 for b in bases.values()):
            extra = _extension_base(reference, start, end)
            bases = {allele: extra + b for allele, b in bases.items()}
            start -= 1
            changed = True

    while (all(len(b) >= 2 for b in bases.values()) and
           len({b[0] for b in bases.values()}) == 1):
        bases = {allele: b[1:] for allele, b in bases.items()}
        start += 1

    aligned = [Allele(bases[a], is_reference=a.is_reference) for a in alleles]
    if aligned != list(alleles):
        logger.debug(
            "Left-aligned %s:%d %s -> %d %s",
            reference.name, original_start, [str(a) for a in alleles],
            start, [str(a) for a in aligned],
        )
    return start, end, aligned
