"""
Building outage notifications for a mailing list.

An outage's mailing list is a comma-separated list of user ids. Each id is
resolved through the user directory and gets the rendered outage title as
subject and the rendered description as body.
"""

import logging
from dataclasses import dataclass

from outage_common.directory import AdminDirectory, UserAccount
from outage_common.exceptions import InvalidInputError
from outage_common.formatting import Formatter
from outage_common.models import Outage

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """A rendered outage notice addressed to one user."""

    recipient: UserAccount
    subject: str
    body: str
    outage_id: int | None = None


def parse_mailing_list(value: str | None) -> list[int]:
    """
    Parse a comma-separated list of user ids.

    Blank entries are skipped and repeated ids are kept once, in order
    of first appearance.

    Args:
        value: Raw mailing list, e.g. "3, 7,12"

    Returns:
        List of user ids

    Raises:
        InvalidInputError: If an entry is not an integer
    """
    if not value:
        return []

    user_ids: list[int] = []
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        try:
            user_id = int(entry)
        except ValueError as e:
            raise InvalidInputError(f"Invalid user id in mailing list: {entry!r}") from e
        if user_id not in user_ids:
            user_ids.append(user_id)
    return user_ids


def build_notifications(
    outage: Outage, directory: AdminDirectory, formatter: Formatter | None = None
) -> list[Notification]:
    """
    Render one notification per mailing-list recipient.

    Ids that are not found in the directory are skipped.

    Args:
        outage: Outage to announce
        directory: User directory used to resolve recipient ids
        formatter: Formatter for placeholders (default formatter if None)

    Returns:
        Notifications in mailing-list order
    """
    user_ids = parse_mailing_list(outage.outagemailinglist)
    if not user_ids:
        logger.debug(f"Outage {outage.id} has an empty mailing list")
        return []

    subject = outage.get_title(formatter)
    body = outage.get_description(formatter)

    notifications = []
    for user_id in user_ids:
        user = directory.get_user(user_id)
        if user is None:
            logger.warning(f"Outage {outage.id}: recipient {user_id} not found, skipping")
            continue
        notifications.append(
            Notification(recipient=user, subject=subject, body=body, outage_id=outage.id)
        )

    logger.info(f"Outage {outage.id}: built {len(notifications)} notification(s)")
    return notifications
