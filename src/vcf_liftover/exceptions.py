"""Exceptions raised by the liftover core."""


class LiftoverError(Exception):
    """Base class for liftover invariant violations."""

    pass


class ReferenceMismatchError(LiftoverError):
    """Raised when a reference allele does not match the reference sequence."""

    def __init__(
        self,
        contig: str,
        start: int,
        end: int,
        allele: str,
        reference_bases: str,
    ):
        self.contig = contig
        self.start = start
        self.end = end
        self.allele = allele
        self.reference_bases = reference_bases
        super().__init__(
            f"Reference allele doesn't match reference: Allele={allele}, "
            f"at {contig}:{start}-{end}, ref={reference_bases}"
        )


class MissingReferenceAlleleError(LiftoverError):
    """Raised when an allele set has no allele flagged as reference."""

    def __init__(self, alleles: list[str]):
        self.alleles = alleles
        super().__init__(f"No reference allele among alleles: {alleles}")


class AlleleCardinalityError(LiftoverError):
    """Raised when original and new allele lists differ in length."""

    def __init__(self, original: list[str], new: list[str]):
        self.original = original
        self.new = new
        super().__init__(
            "Error in allele lists: the original and new allele lists are not "
            f"the same length: {original} / {new}"
        )


class AlleleNotFoundError(LiftoverError):
    """Raised when a called allele is missing from the remap table."""

    def __init__(self, allele: str, original: list[str], new: list[str]):
        self.allele = allele
        self.original = original
        self.new = new
        super().__init__(f"Allele not found: {allele}, {original} / {new}")


class IntervalFileError(Exception):
    """Error parsing a target interval table."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
