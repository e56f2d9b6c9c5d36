"""Rewriting genotype calls after alleles have been transformed."""

from collections.abc import Sequence
from dataclasses import replace

from .exceptions import AlleleCardinalityError, AlleleNotFoundError
from .models import Allele, Genotype


def build_allele_map(
    original_alleles: Sequence[Allele], new_alleles: Sequence[Allele]
) -> dict[Allele, Allele]:
    """Map each original allele to the new allele at the same position."""
    if len(original_alleles) != len(new_alleles):
        raise AlleleCardinalityError(
            [str(a) for a in original_alleles], [str(a) for a in new_alleles]
        )
    return dict(zip(original_alleles, new_alleles, strict=True))


def remap_alleles(
    alleles: Sequence[Allele],
    allele_map: dict[Allele, Allele],
) -> tuple[Allele, ...] | None:
    """Translate called alleles through a map; None if any allele is unmapped.

    No-call alleles are passed through.
    """
    remapped = []
    for allele in alleles:
        if allele.is_no_call:
            remapped.append(allele)
            continue
        new_allele = allele_map.get(allele)
        if new_allele is None:
            return None
        remapped.append(new_allele)
    return tuple(remapped)


def fix_genotypes(
    genotypes: Sequence[Genotype],
    original_alleles: Sequence[Allele],
    new_alleles: Sequence[Allele],
) -> tuple[Genotype, ...]:
    """Rewrite every genotype call from the original alleles to the new ones.

    AD and PL are positional in allele order, which is unchanged, so they are
    carried over as-is.

    Raises:
        AlleleCardinalityError: If the allele lists differ in length
        AlleleNotFoundError: If a called allele is not in the original list
    """
    if list(original_alleles) == list(new_alleles):
        return tuple(genotypes)

    allele_map = build_allele_map(original_alleles, new_alleles)

    fixed = []
    for genotype in genotypes:
        alleles = remap_alleles(genotype.alleles, allele_map)
        if alleles is None:
            missing = next(
                a for a in genotype.alleles if not a.is_no_call and a not in allele_map
            )
            raise AlleleNotFoundError(
                str(missing),
                [str(a) for a in original_alleles],
                [str(a) for a in new_alleles],
            )
        fixed.append(replace(genotype, alleles=alleles, fields=dict(genotype.fields)))
    return tuple(fixed)
