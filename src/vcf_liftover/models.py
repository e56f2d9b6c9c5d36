"""Data models for alleles, genotypes and variant records."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

NO_CALL_STRING = "."
SPAN_DEL_STRING = "*"


@dataclass(frozen=True)
class Allele:
    """A single allele at a variant site.

    Two alleles are equal when their bases and reference flag are equal, so
    alleles can be used as dictionary keys when remapping genotypes. Plain
    bases are stored uppercase; symbolic alleles are kept as written.
    """

    bases: str
    is_reference: bool = False

    def __post_init__(self):
        if not self.is_symbolic and self.bases != self.bases.upper():
            object.__setattr__(self, "bases", self.bases.upper())

    @property
    def is_no_call(self) -> bool:
        return self.bases == NO_CALL_STRING

    @property
    def is_symbolic(self) -> bool:
        """Symbolic (<DEL>), breakend (A[chr2:10[, .A) or spanning deletion (*)."""
        bases = self.bases
        if not bases or self.is_no_call:
            return False
        if bases == SPAN_DEL_STRING:
            return True
        if bases.startswith("<") and bases.endswith(">"):
            return True
        if "[" in bases or "]" in bases:
            return True
        return len(bases) > 1 and (bases.startswith(".") or bases.endswith("."))

    @property
    def length(self) -> int:
        return len(self.bases)

    def base_string_equals(self, other: "Allele") -> bool:
        """Case-insensitive comparison of bases, ignoring the reference flag."""
        return self.bases.upper() == other.bases.upper()

    def __str__(self) -> str:
        return self.bases + ("*" if self.is_reference else "")


NO_CALL = Allele(NO_CALL_STRING)


class Strand(str, Enum):
    """Orientation of a target interval relative to the source."""

    FORWARD = "+"
    REVERSE = "-"

    @classmethod
    def parse(cls, value: str) -> "Strand":
        if value in ("+", "1", "forward"):
            return cls.FORWARD
        if value in ("-", "-1", "reverse"):
            return cls.REVERSE
        raise ValueError(f"Invalid strand: {value!r}")


@dataclass(frozen=True)
class TargetInterval:
    """A mapped interval on the destination reference (1-based, inclusive)."""

    contig: str
    start: int
    end: int
    strand: Strand = Strand.FORWARD

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def is_negative_strand(self) -> bool:
        return self.strand is Strand.REVERSE


@dataclass
class Genotype:
    """Per-sample genotype call."""

    sample: str
    alleles: tuple[Allele, ...]
    phased: bool = False
    # Per-allele and per-genotype values; None marks a missing entry
    ad: tuple[int | None, ...] | None = None
    pl: tuple[int | None, ...] | None = None
    # Remaining FORMAT values (GQ, DP, ...) carried through verbatim
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def ploidy(self) -> int:
        return len(self.alleles)

    @property
    def is_no_call(self) -> bool:
        return all(a.is_no_call for a in self.alleles)


@dataclass
class VariantRecord:
    """A variant site with its alleles and per-sample genotypes."""

    contig: str
    start: int
    end: int
    alleles: tuple[Allele, ...]
    genotypes: tuple[Genotype, ...] = ()
    filters: tuple[str, ...] = ()
    qual: float | None = None
    info: dict[str, Any] = field(default_factory=dict)
    id: str | None = None

    @classmethod
    def from_strings(
        cls, contig: str, pos: int, ref: str, alts: list[str], **kwargs: Any
    ) -> "VariantRecord":
        """Build a record from REF/ALT strings; END is derived from REF."""
        alleles = (Allele(ref, is_reference=True),) + tuple(Allele(a) for a in alts)
        return cls(
            contig=contig,
            start=pos,
            end=pos + len(ref) - 1,
            alleles=alleles,
            **kwargs,
        )

    @property
    def reference(self) -> Allele | None:
        return next((a for a in self.alleles if a.is_reference), None)

    @property
    def alternates(self) -> tuple[Allele, ...]:
        return tuple(a for a in self.alleles if not a.is_reference)

    @property
    def is_biallelic(self) -> bool:
        return len(self.alleles) == 2

    @property
    def variant_type(self) -> str:
        """Classify the site: 'snp', 'mnp', 'indel', 'mixed', 'symbolic' or 'no_variation'."""
        ref = self.reference
        alts = self.alternates
        if ref is None or not alts:
            return "no_variation"

        types = set()
        for alt in alts:
            if alt.is_symbolic:
                types.add("symbolic")
            elif ref.length == alt.length:
                types.add("snp" if ref.length == 1 else "mnp")
            else:
                types.add("indel")

        if len(types) == 1:
            return types.pop()
        return "mixed"

    @property
    def is_indel(self) -> bool:
        return self.variant_type == "indel"

    @property
    def is_snp(self) -> bool:
        return self.variant_type == "snp"

    @property
    def length(self) -> int:
        return self.end - self.start + 1
