"""Read-only access to destination reference sequences."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pyfaidx import Fasta

logger = logging.getLogger(__name__)


class ReferenceSequence(Protocol):
    """Protocol for a single reference contig (0-based coordinates)."""

    name: str

    def __len__(self) -> int:
        ...

    def base_at(self, offset: int) -> str:
        """Return the base at a 0-based offset."""
        ...

    def fetch(self, start: int, end: int) -> str:
        """Return bases in the half-open 0-based range [start, end)."""
        ...


def _check_range(name: str, length: int, start: int, end: int) -> None:
    if start < 0 or end > length or start > end:
        raise IndexError(f"Range [{start}, {end}) outside {name} (length {length})")


@dataclass(frozen=True)
class InMemorySequence:
    """A reference contig held as a plain string."""

    name: str
    bases: str

    def __len__(self) -> int:
        return len(self.bases)

    def base_at(self, offset: int) -> str:
        _check_range(self.name, len(self.bases), offset, offset + 1)
        return self.bases[offset]

    def fetch(self, start: int, end: int) -> str:
        _check_range(self.name, len(self.bases), start, end)
        return self.bases[start:end]


class FastaContig:
    """A contig of an indexed FASTA file, read lazily through pyfaidx."""

    def __init__(self, name: str, record):
        self.name = name
        self._record = record

    def __len__(self) -> int:
        return len(self._record)

    def base_at(self, offset: int) -> str:
        return self.fetch(offset, offset + 1)

    def fetch(self, start: int, end: int) -> str:
        _check_range(self.name, len(self._record), start, end)
        return str(self._record[start:end])


class FastaReference:
    """Indexed FASTA reference (a .fai index is built on first open)."""

    def __init__(self, fasta_path: Path | str):
        self.path = Path(fasta_path)
        if not self.path.exists():
            raise FileNotFoundError(f"Reference FASTA not found: {self.path}")
        self._fasta = Fasta(str(self.path), as_raw=True, sequence_always_upper=False)
        self._contigs: dict[str, FastaContig] = {}
        logger.debug("Opened reference %s with %d contigs", self.path, len(self._fasta.keys()))

    @property
    def contig_names(self) -> list[str]:
        return list(self._fasta.keys())

    def __contains__(self, contig: str) -> bool:
        return contig in self._fasta.keys()

    def __getitem__(self, contig: str) -> FastaContig:
        if contig not in self._contigs:
            if contig not in self:
                raise KeyError(f"Contig not in reference: {contig}")
            self._contigs[contig] = FastaContig(contig, self._fasta[contig])
        return self._contigs[contig]

    def close(self) -> None:
        self._fasta.close()

    def __enter__(self) -> "FastaReference":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
