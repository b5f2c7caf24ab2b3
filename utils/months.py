"""Month-name parsing for the month-of-year filter.

A month name is read the way a calendar date "<name> 1, 2000" would be read,
and only its calendar month (1-12) is kept.  The year plays no part in the
filter: "March" selects every sale made in March of any year.
"""

from datetime import datetime

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class InvalidMonthError(ValueError):
    """Raised when a month name cannot be resolved to a calendar month."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid month: '{value}'. Expected a month name such as 'March'.")
        self.value = value


def parse_month(name: str) -> int:
    """Return the calendar month number (1-12) for a month name.

    Accepts full English month names and their three-letter abbreviations,
    case-insensitively.

    Examples:
        >>> parse_month("March")
        3
        >>> parse_month(" dec ")
        12

    Raises:
        InvalidMonthError: If the name is not a month.
    """
    text = (name or "").strip()
    for fmt in ("%B %d, %Y", "%b %d, %Y"):
        try:
            return datetime.strptime(f"{text} 1, 2000", fmt).month
        except ValueError:
            continue
    raise InvalidMonthError(name)

