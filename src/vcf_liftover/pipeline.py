"""Batch liftover of a stream of variant records."""

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import Protocol

from .exceptions import LiftoverError
from .intervals import IntervalLookup
from .liftover import LiftStatus, lift
from .models import TargetInterval, VariantRecord
from .reference import ReferenceSequence
from .swap import swap_ref_alt

logger = logging.getLogger(__name__)

FAILED_REASON = "FailedReason"
REJECT_MISMATCHED_REF = "MismatchedRefAllele"
REJECT_INVARIANT = "InvariantViolation"

Mapper = Callable[[VariantRecord], TargetInterval | None]


class ReferenceGenome(Protocol):
    """Destination reference: contig name -> ReferenceSequence."""

    def __contains__(self, contig: str) -> bool:
        ...

    def __getitem__(self, contig: str) -> ReferenceSequence:
        ...


@dataclass
class LiftoverConfig:
    """Configuration for VCF liftover."""

    write_original_position: bool = False
    recover_swapped_ref_alt: bool = False
    strict: bool = False
    log_level: str = "INFO"


@dataclass
class LiftoverStats:
    """Counts of liftover outcomes."""

    total: int = 0
    lifted: int = 0
    swapped: int = 0
    rejected: Counter = field(default_factory=Counter)

    @property
    def rejected_total(self) -> int:
        return sum(self.rejected.values())

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "lifted": self.lifted,
            "swapped": self.swapped,
            "rejected": dict(self.rejected),
        }


@dataclass
class LiftOutcome:
    """A lifted record, or the source record annotated with why it was rejected."""

    record: VariantRecord
    lifted: bool
    reason: str | None = None


def interval_mapper(lookup: IntervalLookup) -> Mapper:
    """Build a mapper that looks targets up by source contig and start."""

    def mapper(record: VariantRecord) -> TargetInterval | None:
        return lookup.get((record.contig, record.start))

    return mapper


class LiftoverPipeline:
    """Lift records one by one, verifying each against the destination reference."""

    def __init__(
        self,
        mapper: Mapper,
        reference: ReferenceGenome,
        config: LiftoverConfig | None = None,
    ):
        self.mapper = mapper
        self.reference = reference
        self.config = config or LiftoverConfig()
        self.stats = LiftoverStats()

    def _reject(self, record: VariantRecord, reason: str) -> LiftOutcome:
        self.stats.rejected[reason] += 1
        info = dict(record.info)
        info[FAILED_REASON] = reason
        return LiftOutcome(replace(record, info=info), lifted=False, reason=reason)

    def lift_record(self, record: VariantRecord) -> LiftOutcome:
        """Lift a single record.

        Raises:
            LiftoverError: On invariant violations when the config is strict
        """
        self.stats.total += 1

        target = self.mapper(record)
        if target is None or target.contig not in self.reference:
            return self._reject(record, LiftStatus.NO_TARGET.value)
        reference = self.reference[target.contig]
        if target.end > len(reference):
            logger.warning(
                "Target %s:%d-%d for %s:%d lies off the reference (length %d)",
                target.contig, target.start, target.end, record.contig, record.start,
                len(reference),
            )
            return self._reject(record, LiftStatus.NO_TARGET.value)

        try:
            result = lift(record, target, reference, self.config.write_original_position)
        except LiftoverError as e:
            if self.config.strict:
                raise
            logger.warning("Invariant violation at %s:%d: %s", record.contig, record.start, e)
            return self._reject(record, REJECT_INVARIANT)

        if not result.ok:
            logger.debug("Rejected %s:%d (%s)", record.contig, record.start, result.status.value)
            return self._reject(record, result.status.value)

        lifted = result.variant
        try:
            ref_bases = reference.fetch(lifted.start - 1, lifted.end)
        except IndexError as e:
            logger.warning("Lifted %s:%d lies off the reference: %s",
                           record.contig, record.start, e)
            return self._reject(record, LiftStatus.NO_TARGET.value)

        if lifted.reference.bases.upper() != ref_bases.upper():
            alt = lifted.alternates[0] if lifted.is_biallelic else None
            if (self.config.recover_swapped_ref_alt and lifted.is_snp
                    and alt is not None and alt.bases.upper() == ref_bases.upper()):
                lifted = swap_ref_alt(lifted)
                self.stats.swapped += 1
            else:
                logger.debug(
                    "Lifted reference allele %s at %s:%d does not match %s",
                    lifted.reference.bases, lifted.contig, lifted.start, ref_bases,
                )
                return self._reject(record, REJECT_MISMATCHED_REF)

        self.stats.lifted += 1
        return LiftOutcome(lifted, lifted=True)

    def run(self, records: Iterable[VariantRecord]) -> Iterator[LiftOutcome]:
        """Lift a stream of records, yielding one outcome per input record."""
        for record in records:
            yield self.lift_record(record)

        logger.info(
            "Lifted %d of %d variants (%d swapped, %d rejected)",
            self.stats.lifted, self.stats.total, self.stats.swapped, self.stats.rejected_total,
        )
        for reason, count in sorted(self.stats.rejected.items()):
            logger.info("  %s: %d", reason, count)
