import argparse
import logging
import os

from generation.batch import resimplify_collection
from routes.policy import EVENT_ID, PipelinePolicy, collection_path
from routes.store import JsonFileDocumentStore


def simplify_routes(store_dir: str, event_id: str, policy: PipelinePolicy, dry_run: bool = False) -> None:
    print("Simplifying route geometries...\n")
    print(f"Tolerance: {policy.tolerance_degrees} (~{round(policy.tolerance_degrees * 100_000)}m accuracy), "
          f"max {policy.max_points} points\n")

    store = JsonFileDocumentStore(store_dir)
    report = resimplify_collection(store, collection_path(event_id), policy=policy, dry_run=dry_run)

    for day in report.skipped_days:
        print(f"day{day}: No geometry, skipping")
    for day in report.days:
        print(f"day{day.day}: {day.before} → {day.after} points ({day.reduction_percent}% reduction)")

    print("\n-------------------")
    print(f"Total: {report.total_before} → {report.total_after} points ({report.reduction_percent}% reduction)")
    print(f"Estimated size: ~{report.estimated_kb_before}KB → ~{report.estimated_kb_after}KB")
    if dry_run:
        print("\nDry run, nothing written.")
    else:
        print("\nAll routes simplified!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Re-simplify every stored route geometry.")
    parser.add_argument("--store-dir", default=os.getenv("ROUTE_STORE_DIR", "data"))
    parser.add_argument("--event", default=EVENT_ID)
    parser.add_argument("--tolerance", type=float, default=0.0005)
    parser.add_argument("--max-points", type=int, default=1000)
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    policy = PipelinePolicy(tolerance_degrees=args.tolerance, max_points=args.max_points)
    policy.validate()
    simplify_routes(args.store_dir, args.event, policy, dry_run=args.dry_run)
