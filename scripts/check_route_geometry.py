import argparse
import csv
import os
from typing import Optional

from generation.batch import geometry_report
from routes.policy import EVENT_ID, collection_path
from routes.store import JsonFileDocumentStore


def check(store_dir: str, event_id: str, csv_path: Optional[str] = None) -> None:
    store = JsonFileDocumentStore(store_dir)
    stats = geometry_report(store, collection_path(event_id))

    print("Route geometry storage analysis:\n")
    for day in stats:
        note = f", {day.dropped_points} malformed" if day.dropped_points else ""
        print(f"day{day.day}: {day.coordinates} coordinates (~{round(day.estimated_bytes / 1024)}KB{note})")

    total_coordinates = sum(day.coordinates for day in stats)
    total_bytes = sum(day.estimated_bytes for day in stats)
    print("\n-------------------")
    print(f"Total: {total_coordinates} coordinates (~{round(total_bytes / 1024)}KB)")

    if csv_path:
        with open(csv_path, "w", newline="") as file:
            writer = csv.writer(file)
            writer.writerow(["day", "coordinates", "estimated_bytes", "dropped_points"])
            for day in stats:
                writer.writerow([day.day, day.coordinates, day.estimated_bytes, day.dropped_points])
        print(f"Results written to '{csv_path}'.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Report stored route geometry size per day.")
    parser.add_argument("--store-dir", default=os.getenv("ROUTE_STORE_DIR", "data"))
    parser.add_argument("--event", default=EVENT_ID)
    parser.add_argument("--csv", default=None)
    args = parser.parse_args()

    check(args.store_dir, args.event, args.csv)
