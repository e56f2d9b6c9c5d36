"""Swapping the reference and alternate alleles of a biallelic SNP."""

from dataclasses import replace

from .genotypes import remap_alleles
from .models import Allele, VariantRecord

SWAPPED_ALLELES = "SwappedAlleles"


def swap_ref_alt(variant: VariantRecord) -> VariantRecord:
    """
    Swap the reference and alternate alleles of a biallelic SNP.

    Genotype calls are relabeled, a two-entry AD is swapped and a three-entry
    PL (hom-ref, het, hom-alt) is reversed. Other AD/PL lengths are left as
    they are. INFO annotations are not rewritten; the record is tagged with
    SwappedAlleles=True instead.

    Args:
        variant: Biallelic variant; SNP-ness is not checked

    Returns:
        New VariantRecord with swapped alleles

    Raises:
        ValueError: If the variant does not have exactly two alleles
    """
    if not variant.is_biallelic:
        raise ValueError(
            f"Can only swap alleles of a biallelic site, got {len(variant.alleles)} "
            f"alleles at {variant.contig}:{variant.start}"
        )

    old = variant.alleles
    # Same bases, opposite position and reference flag
    swapped = (
        Allele(old[1].bases, is_reference=old[0].is_reference),
        Allele(old[0].bases, is_reference=old[1].is_reference),
    )
    allele_map = {old[idx]: swapped[1 - idx] for idx in range(2)}

    genotypes = []
    for genotype in variant.genotypes:
        alleles = remap_alleles(genotype.alleles, allele_map)
        if alleles is None:
            raise ValueError(
                f"Genotype of {genotype.sample} calls an allele outside "
                f"{[str(a) for a in old]}"
            )

        ad = genotype.ad
        if ad is not None and len(ad) == 2:
            ad = (ad[1], ad[0])

        pl = genotype.pl
        if pl is not None and len(pl) == 3:
            pl = (pl[2], pl[1], pl[0])

        genotypes.append(
            replace(genotype, alleles=alleles, ad=ad, pl=pl, fields=dict(genotype.fields))
        )

    info = dict(variant.info)
    info[SWAPPED_ALLELES] = True

    return replace(
        variant,
        alleles=swapped,
        genotypes=tuple(genotypes),
        filters=tuple(variant.filters),
        info=info,
    )
