"""
Promote old RESERVED shipments to READY.

Shipments created before the cutoff date switch to READY and have their
parts booked through the parts ledger, exactly as a manual status change.

Usage:
    python scripts/fix_reserved_status.py --cutoff 2026-01-28 [--dry-run]
"""
import sys
import os
import argparse
import logging
from datetime import datetime

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.core.database import SessionLocal
from app.services.shipment_service import ShipmentService

logger = logging.getLogger("fix_reserved_status")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Promote RESERVED shipments created before a cutoff to READY")
    parser.add_argument("--cutoff", default=os.environ.get("RESERVED_CUTOFF_DATE"),
                        help="ISO date, e.g. 2026-01-28 (or RESERVED_CUTOFF_DATE env)")
    parser.add_argument("--dry-run", action="store_true", default=os.environ.get("DRY_RUN") == "1")
    args = parser.parse_args(argv)

    if not args.cutoff:
        parser.error("Missing cutoff date (--cutoff or RESERVED_CUTOFF_DATE)")
    try:
        cutoff = datetime.fromisoformat(args.cutoff)
    except ValueError:
        parser.error("Invalid cutoff date. Use ISO date like 2026-01-28.")

    db = SessionLocal()
    try:
        count = ShipmentService.promote_reserved(db, cutoff, dry_run=args.dry_run)
    finally:
        db.close()

    if args.dry_run:
        print(f"[DRY RUN] Would update {count} shipments to READY.")
    else:
        print(f"Updated {count} shipments to READY.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
