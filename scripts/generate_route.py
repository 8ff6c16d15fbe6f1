import argparse
import logging
import os
import sys

from generation.workflow import GenerationWorkflow, GeneratedNotSavedError
from routes.models import RouteDocument, RouteValidationError
from routes.policy import EVENT_ID, PipelinePolicy, collection_path, default_policy
from routes.store import JsonFileDocumentStore, StorageError
from routing.directions_client import DirectionsClient, DirectionsError


def generate_day(store_dir: str, day: int, event_id: str, policy: PipelinePolicy) -> int:
    store = JsonFileDocumentStore(store_dir)
    collection = collection_path(event_id)

    data = store.get(collection, day)
    if data is None:
        print(f"Route for day {day} not found in {collection}")
        return 1
    document = RouteDocument.from_storage(data, day=day)

    client = DirectionsClient(profile=policy.profile, timeout=policy.request_timeout_s)
    workflow = GenerationWorkflow(client, store, policy=policy, collection=collection)

    try:
        result = workflow.generate(document.spec())
    except RouteValidationError as e:
        print(f"[INVALID] Day {day}: {e}")
        return 2
    except DirectionsError as e:
        print(f"[FAILED] Day {day}: {type(e).__name__}: {e} (document unchanged)")
        return 3
    except GeneratedNotSavedError as e:
        print(f"[NOT SAVED] Day {day}: generated {len(e.geometry.path)} points but the write failed: {e}")
        return 4
    except StorageError as e:
        print(f"[STORE] Day {day}: {e}")
        return 5

    geometry = result.geometry
    print(f"[SUCCESS] Day {day}: {geometry.source_point_count} → {len(geometry.path)} points, "
          f"{geometry.distance_miles} mi, {geometry.estimated_time}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate and store the road geometry for one day.")
    parser.add_argument("day", type=int)
    parser.add_argument("--store-dir", default=os.getenv("ROUTE_STORE_DIR", "data"))
    parser.add_argument("--event", default=EVENT_ID)
    parser.add_argument("--tolerance", type=float, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    policy = default_policy()
    if args.tolerance is not None:
        policy = PipelinePolicy(tolerance_degrees=args.tolerance, max_points=policy.max_points)
        policy.validate()

    sys.exit(generate_day(args.store_dir, args.day, args.event, policy))
