"""Liftover of VCF variants, alleles and genotypes between reference assemblies."""

from .exceptions import (
    AlleleCardinalityError,
    AlleleNotFoundError,
    LiftoverError,
    MissingReferenceAlleleError,
    ReferenceMismatchError,
)
from .genotypes import fix_genotypes
from .liftover import LiftResult, LiftStatus, lift, lift_variant
from .models import NO_CALL, Allele, Genotype, Strand, TargetInterval, VariantRecord
from .normalizer import left_align_alleles
from .swap import swap_ref_alt

__version__ = "0.1.0"

__all__ = [
    "NO_CALL",
    "Allele",
    "AlleleCardinalityError",
    "AlleleNotFoundError",
    "Genotype",
    "LiftResult",
    "LiftStatus",
    "LiftoverError",
    "MissingReferenceAlleleError",
    "ReferenceMismatchError",
    "Strand",
    "TargetInterval",
    "VariantRecord",
    "fix_genotypes",
    "left_align_alleles",
    "lift",
    "lift_variant",
    "swap_ref_alt",
]
