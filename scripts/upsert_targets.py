from __future__ import annotations

import argparse
import csv
import json
import os
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib import error, request

QUOTA_COLUMNS = {
    "my_targets": (
        "jds",
        "calls",
        "follow_ups",
        "resume_target",
        "college_target",
        "interviews_target",
        "resumes_received_target",
    ),
    "bd_targets": ("interns_allocated", "interns_active", "accounts"),
}


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def normalize_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip()
    if not value:
        return None
    for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y"):
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def normalize_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        return max(int(float(value)), 0)
    except ValueError:
        return None


def chunk_rows(rows: Iterable[Dict[str, Any]], size: int) -> Iterable[List[Dict[str, Any]]]:
    batch: List[Dict[str, Any]] = []
    for row in rows:
        batch.append(row)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


def split_by_columns(batch: List[Dict[str, Any]]) -> List[List[Dict[str, Any]]]:
    # PostgREST bulk upserts need every object in a request to carry the same keys.
    groups: Dict[Tuple[str, ...], List[Dict[str, Any]]] = defaultdict(list)
    for row in batch:
        groups[tuple(sorted(row))].append(row)
    return list(groups.values())


def build_target_payload(row: Dict[str, str], columns: Tuple[str, ...]) -> Dict[str, Any]:
    manager_id = normalize_int(row.get("team_manager_id"))
    target_date = normalize_date(row.get("target_date"))
    if not manager_id or not target_date:
        return {}

    payload: Dict[str, Any] = {"team_manager_id": manager_id, "target_date": target_date}
    for column in columns:
        value = normalize_int(row.get(column))
        if value is not None:
            payload[column] = value
    return payload


def post_batch(url: str, headers: Dict[str, str], payload: List[Dict[str, Any]]) -> None:
    body = json.dumps(payload).encode("utf-8")
    req = request.Request(url, data=body, method="POST", headers=headers)
    try:
        with request.urlopen(req, timeout=60) as response:
            if response.status not in {200, 201, 204}:
                raise RuntimeError(f"Unexpected response: {response.status}")
    except error.HTTPError as exc:
        details = exc.read().decode("utf-8")
        raise RuntimeError(f"HTTP {exc.code}: {details}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Upsert daily targets via Supabase REST API.")
    parser.add_argument("csv_path", help="Path to targets CSV file (team_manager_id,target_date,<quota columns>)")
    parser.add_argument("--table", choices=sorted(QUOTA_COLUMNS), default="my_targets", help="Target table")
    parser.add_argument("--batch-size", type=int, default=500, help="Rows per request batch")
    parser.add_argument(
        "--env-file",
        default=os.path.join(os.path.dirname(__file__), "..", ".env"),
        help="Path to .env file",
    )
    args = parser.parse_args()

    load_env_file(os.path.abspath(args.env_file))

    supabase_url = os.environ.get("SUPABASE_URL")
    service_role_key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
    if not supabase_url or not service_role_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in .env")

    endpoint = f"{supabase_url.rstrip('/')}/rest/v1/{args.table}?on_conflict=team_manager_id,target_date"
    headers = {
        "apikey": service_role_key,
        "Authorization": f"Bearer {service_role_key}",
        "Content-Type": "application/json",
        "Prefer": "resolution=merge-duplicates",
    }
    columns = QUOTA_COLUMNS[args.table]

    with open(args.csv_path, "r", encoding="utf-8", newline="") as csv_file:
        reader = csv.DictReader(csv_file)
        rows = (build_target_payload(row, columns) for row in reader)
        # One row per (manager, date); a later CSV line replaces an earlier one.
        unique: Dict[Tuple[int, str], Dict[str, Any]] = {}
        for row in rows:
            if row:
                unique[(row["team_manager_id"], row["target_date"])] = row
        for index, batch in enumerate(chunk_rows(unique.values(), args.batch_size), start=1):
            for group in split_by_columns(batch):
                post_batch(endpoint, headers, group)
            print(f"Uploaded batch {index} ({len(batch)} rows)")


if __name__ == "__main__":
    main()
