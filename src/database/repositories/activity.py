"""Processing activity repository."""

from sqlalchemy import select

from src.database.models import ActivityRecipient, ProcessingActivity, Recipient
from src.database.repositories.base import BaseRepository


class ProcessingActivityRepository(BaseRepository[ProcessingActivity]):
    """Repository for ProcessingActivity and its recipient links."""

    model = ProcessingActivity

    def get_recipients(self, activity_id: int) -> list[Recipient]:
        """Get recipients linked to an activity.

        Only recipients of the activity's own organization are returned.

        Args:
            activity_id: Activity primary key.

        Returns:
            Linked recipients ordered by name.
        """
        stmt = (
            select(Recipient)
            .join(ActivityRecipient, ActivityRecipient.recipient_id == Recipient.id)
            .join(ProcessingActivity, ProcessingActivity.id == ActivityRecipient.activity_id)
            .where(
                ActivityRecipient.activity_id == activity_id,
                Recipient.organization_id == ProcessingActivity.organization_id,
            )
            .order_by(Recipient.name, Recipient.id)
        )
        return list(self._session.scalars(stmt).all())

    def link_recipient(self, activity_id: int, recipient_id: int) -> ActivityRecipient:
        """Link a recipient to an activity.

        Args:
            activity_id: Activity primary key.
            recipient_id: Recipient primary key.

        Returns:
            Created association row.
        """
        link = ActivityRecipient(activity_id=activity_id, recipient_id=recipient_id)
        self._session.add(link)
        self._session.flush()
        return link
