"""Provision memberships that approval failed to create and resync member counts."""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from temple_hub.core.errors import TempleHubError
from temple_hub.core.logging import configure_logging
from temple_hub.db.session import SessionLocal
from temple_hub.models import Community
from temple_hub.services.application_workflow import ApplicationWorkflow

logger = logging.getLogger(__name__)


def reconcile(community_ids: list[str] | None = None) -> int:
    """Reconcile the given communities, or every community when none are given.

    Returns the total number of memberships provisioned.
    """
    total = 0
    with SessionLocal() as db:
        if not community_ids:
            community_ids = list(db.scalars(select(Community.id).order_by(Community.name)))
        logger.info("Reconciling %d communities", len(community_ids))
        workflow = ApplicationWorkflow(db)
        for community_id in community_ids:
            report = workflow.reconcile(community_id)
            print(
                f"[reconcile] {report.community_id}: provisioned={report.provisioned} "
                f"member_count={report.member_count}"
            )
            total += report.provisioned
    return total


def main() -> None:
    parser = argparse.ArgumentParser(description="Reconcile approved applications with memberships")
    parser.add_argument(
        "--community-id",
        action="append",
        dest="community_ids",
        default=None,
        help="Community to reconcile; repeat for several. Defaults to all communities.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this run",
    )
    args = parser.parse_args()

    configure_logging(args.log_level)
    try:
        total = reconcile(args.community_ids)
    except (TempleHubError, SQLAlchemyError) as exc:
        print(f"[reconcile] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"[reconcile] done, {total} membership(s) provisioned")


if __name__ == "__main__":
    main()
