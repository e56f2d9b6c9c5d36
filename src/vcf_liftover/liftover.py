"""Lifting variant records onto a mapped target interval.

A forward-strand target is a pure coordinate shift. A reverse-strand target
requires the alleles to be reverse complemented; indels additionally have
their anchor base moved to the other end and are then left-aligned on the
destination reference. Multi-allelic indels are not supported.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum

from .exceptions import LiftoverError, MissingReferenceAlleleError, ReferenceMismatchError
from .genotypes import fix_genotypes
from .models import Allele, Genotype, TargetInterval, VariantRecord
from .normalizer import left_align_alleles
from .reference import ReferenceSequence
from .sequence import reverse_complement

logger = logging.getLogger(__name__)

ORIGINAL_CONTIG = "OriginalContig"
ORIGINAL_START = "OriginalStart"


class LiftStatus(str, Enum):
    """Outcome of lifting a single record."""

    SUCCESS = "Success"
    NO_TARGET = "NoTarget"
    LENGTH_MISMATCH = "LengthMismatch"
    UNSUPPORTED = "UnsupportedMultiallelicIndel"
    REFERENCE_MISMATCH = "ReferenceMismatch"


@dataclass(frozen=True)
class LiftResult:
    """Tagged result of a liftover: the lifted variant or why there is none."""

    status: LiftStatus
    variant: VariantRecord | None = None
    error: LiftoverError | None = None

    @property
    def ok(self) -> bool:
        return self.status is LiftStatus.SUCCESS

    @classmethod
    def success(cls, variant: VariantRecord) -> "LiftResult":
        return cls(LiftStatus.SUCCESS, variant=variant)

    @classmethod
    def failure(cls, status: LiftStatus, error: LiftoverError | None = None) -> "LiftResult":
        return cls(status, error=error)


def _copy_genotypes(genotypes: Sequence[Genotype]) -> tuple[Genotype, ...]:
    return tuple(replace(g, fields=dict(g.fields)) for g in genotypes)


def lift_simple_variant(source: VariantRecord, target: TargetInterval) -> LiftResult:
    """Shift a variant onto a same-strand target of equal length."""
    ref = source.reference
    if ref is None:
        raise MissingReferenceAlleleError([str(a) for a in source.alleles])

    if ref.length != target.length:
        logger.debug(
            "Reference allele length %d at %s:%d differs from target %s:%d-%d",
            ref.length, source.contig, source.start, target.contig, target.start, target.end,
        )
        return LiftResult.failure(LiftStatus.LENGTH_MISMATCH)

    return LiftResult.success(
        replace(
            source,
            contig=target.contig,
            start=target.start,
            end=target.end,
            alleles=tuple(source.alleles),
            genotypes=_copy_genotypes(source.genotypes),
        )
    )


def reverse_complement_allele(
    allele: Allele,
    target: TargetInterval,
    reference: ReferenceSequence,
    is_biallelic_indel: bool,
    add_to_start: bool,
) -> Allele:
    """Reverse complement one allele onto the opposite strand.

    Symbolic and no-call alleles are returned untouched. For an indel the
    leading anchor base is dropped and a new anchor is taken from the
    reference: the base before the target when add_to_start, otherwise the
    base at the target's end.
    """
    if allele.is_symbolic or allele.is_no_call:
        return allele

    if not is_biallelic_indel:
        return Allele(reverse_complement(allele.bases), is_reference=allele.is_reference)

    flipped = reverse_complement(allele.bases[1:])
    if add_to_start:
        bases = reference.base_at(target.start - 2).upper() + flipped
    else:
        bases = flipped + reference.base_at(target.end - 1).upper()
    return Allele(bases, is_reference=allele.is_reference)


def reverse_complement_alleles(
    alleles: Sequence[Allele],
    target: TargetInterval,
    reference: ReferenceSequence,
    is_biallelic_indel: bool,
    add_to_start: bool,
) -> list[Allele]:
    """Reverse complement an allele list, keeping its order."""
    return [
        reverse_complement_allele(a, target, reference, is_biallelic_indel, add_to_start)
        for a in alleles
    ]


def reverse_complement_variant(
    source: VariantRecord,
    target: TargetInterval,
    reference: ReferenceSequence,
) -> LiftResult:
    """Lift a variant onto a reverse-strand target.

    Raises:
        ValueError: If the target is on the forward strand
        ReferenceMismatchError: If a lifted indel's reference allele disagrees
            with the reference
    """
    if not target.is_negative_strand:
        raise ValueError("This should only be called for negative strand liftovers")

    is_indel = source.is_indel
    if is_indel and not source.is_biallelic:
        logger.debug(
            "Multi-allelic indel at %s:%d cannot be reverse complemented",
            source.contig, source.start,
        )
        return LiftResult.failure(LiftStatus.UNSUPPORTED)

    # Indels carry the base before the event; after flipping strands that
    # base has to come from the left of the target, unless the target
    # starts at the first base of the contig.
    add_to_start = is_indel and target.start > 1
    shift = 1 if add_to_start else 0
    start = target.start - shift
    end = target.end - shift

    alleles = reverse_complement_alleles(source.alleles, target, reference, is_indel, add_to_start)
    if is_indel:
        start, end, alleles = left_align_alleles(start, end, alleles, reference)

    genotypes = fix_genotypes(source.genotypes, source.alleles, alleles)
    if genotypes is source.genotypes:
        genotypes = _copy_genotypes(genotypes)

    return LiftResult.success(
        replace(
            source,
            contig=target.contig,
            start=start,
            end=end,
            alleles=tuple(alleles),
            genotypes=genotypes,
        )
    )


def lift(
    source: VariantRecord,
    target: TargetInterval | None,
    reference: ReferenceSequence,
    write_original_position: bool = False,
) -> LiftResult:
    """
    Lift a variant to the provided target interval.

    If the target is on the opposite strand, alleles and genotypes are reverse
    complemented and indels are left-aligned.

    Args:
        source: Variant to lift
        target: Mapped interval, or None when the mapping failed
        reference: Destination reference contig matching the target
        write_original_position: Record the source contig and start in INFO

    Returns:
        LiftResult; its variant is None unless the status is SUCCESS

    Raises:
        MissingReferenceAlleleError, AlleleCardinalityError, AlleleNotFoundError:
            On malformed input records
    """
    if target is None:
        return LiftResult.failure(LiftStatus.NO_TARGET)

    if target.is_negative_strand:
        try:
            result = reverse_complement_variant(source, target, reference)
        except ReferenceMismatchError as e:
            logger.warning("Cannot lift %s:%d: %s", source.contig, source.start, e)
            return LiftResult.failure(LiftStatus.REFERENCE_MISMATCH, error=e)
    else:
        result = lift_simple_variant(source, target)

    if not result.ok:
        return result

    info = dict(source.info)
    if write_original_position:
        info[ORIGINAL_CONTIG] = source.contig
        info[ORIGINAL_START] = source.start

    return LiftResult.success(
        replace(
            result.variant,
            filters=tuple(source.filters),
            qual=source.qual,
            info=info,
            id=source.id,
        )
    )


def lift_variant(
    source: VariantRecord,
    target: TargetInterval | None,
    reference: ReferenceSequence,
    write_original_position: bool = False,
) -> VariantRecord | None:
    """Lift a variant, returning None if it could not be lifted."""
    return lift(source, target, reference, write_original_position).variant
