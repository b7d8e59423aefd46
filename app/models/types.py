"""Column types that keep the monetary amount invariant at the persistence boundary."""
from sqlalchemy import Float
from sqlalchemy.types import TypeDecorator

from app.core.money import normalize_amount


class MonetaryAmount(TypeDecorator):
    """
    Float column normalized on write and again on read.

    Rows edited outside the application (NULL, NaN, or text stored in the column)
    still come back as a finite float.
    """

    impl = Float
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return normalize_amount(value)

    def process_result_value(self, value, dialect):
        return normalize_amount(value)

    def result_processor(self, dialect, coltype):
        # Skip the driver-level float() conversion: text left in the column must read back as 0
        def process(value):
            return self.process_result_value(value, dialect)

        return process

    def process_literal_param(self, value, dialect):
        return repr(normalize_amount(value))
