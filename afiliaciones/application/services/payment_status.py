"""Payment-status transition rule for monthly affiliations.

The target status alone decides the date fields; the previous status is
never consulted:

- Pagado      → payment received and government registry both set
- En Proceso  → payment received set, registry cleared
- Pendiente   → both cleared
"""

from datetime import datetime
from typing import NamedTuple, Optional

from afiliaciones.domain.models.affiliation import PaymentStatus


class PaymentDates(NamedTuple):
    date_paid_received: Optional[datetime]
    gov_record_completed_at: Optional[datetime]


def payment_dates_for(
    status: PaymentStatus,
    now: datetime,
    date_paid_received: Optional[datetime] = None,
    gov_record_completed_at: Optional[datetime] = None,
) -> PaymentDates:
    """Date fields for a status; explicit dates win where the status allows them."""
    status = PaymentStatus(status)
    if status is PaymentStatus.PAGADO:
        return PaymentDates(date_paid_received or now, gov_record_completed_at or now)
    if status is PaymentStatus.EN_PROCESO:
        return PaymentDates(date_paid_received or now, None)
    return PaymentDates(None, None)


def apply_payment_status(
    affiliation,
    status: PaymentStatus,
    now: datetime,
    date_paid_received: Optional[datetime] = None,
    gov_record_completed_at: Optional[datetime] = None,
) -> None:
    """Set ``paid_status`` and its dates on an affiliation row in place."""
    dates = payment_dates_for(status, now, date_paid_received, gov_record_completed_at)
    affiliation.paid_status = PaymentStatus(status).value
    affiliation.date_paid_received = dates.date_paid_received
    affiliation.gov_record_completed_at = dates.gov_record_completed_at
