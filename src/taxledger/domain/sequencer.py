"""Named number sequences."""

from taxledger.database.base import Database
from taxledger.domain.entities import Sequence
from taxledger.domain.errors import ValidationError

TRANSACTION_SEQUENCE = Sequence(code="TRANS", name="Transactions", prefix="T", padding_length=4)


def format_number(sequence: Sequence, number: int) -> str:
    """Format a number with the sequence's prefix, padding and suffix."""
    body = str(number).rjust(sequence.padding_length, sequence.padding_char or "0")
    return f"{sequence.prefix}{body}{sequence.suffix}"


class SequencerService:
    """Hands out formatted numbers from stored sequences.

    Sequences listed in ``defaults`` are created on first use.
    """

    def __init__(self, db: Database, defaults: tuple[Sequence, ...] = (TRANSACTION_SEQUENCE,)):
        self.db = db
        self.defaults = {sequence.code: sequence for sequence in defaults}

    def get_sequence(self, code: str) -> Sequence:
        sequence = self.db.get_sequence(code)
        if sequence is None:
            if code not in self.defaults:
                raise ValidationError(f"Sequence '{code}' not found")
            self.db.save_sequence(self.defaults[code])
            sequence = self.defaults[code]
        return sequence

    def next_number(self, code: str) -> str:
        """Advance a sequence and return the formatted number.

        Raises:
            ValidationError: If the sequence does not exist or is inactive
        """
        sequence = self.get_sequence(code)
        if not sequence.is_active:
            raise ValidationError(f"Sequence '{code}' is not active")
        return format_number(sequence, self.db.increment_sequence(code))
