"""Export a repository's activity feed to JSON and CSV formats"""

import argparse
import csv
import json
import os
from datetime import datetime
from pathlib import Path

from cm2git.config import (
    DEFAULT_SORT_ORDER,
    DEFAULT_TYPE_FILTER,
    EXPORTS_DIR,
    SORT_ORDERS,
    TYPE_FILTERS,
    configure_logging,
)
from cm2git.session import ActivitySession

CSV_FIELDS = [
    "type", "id", "parent_pr", "title", "author", "date",
    "kanban_status", "url"
]


def flatten_activities(activities: list) -> list:
    """
    Flatten grouped activities into rows, children after their PR

    Args:
        activities: Grouped (and possibly filtered/sorted) activity list

    Returns:
        List of CSV row dictionaries
    """
    rows = []
    for activity in activities:
        rows.append(_row(activity, None))
        for commit in activity.get("commits", []):
            rows.append(_row(commit, activity.get("number")))
        if activity.get("merge"):
            rows.append(_row(activity["merge"], activity.get("number")))
    return rows


def _row(activity: dict, parent_pr) -> dict:
    return {
        "type": activity["type"],
        "id": activity.get("id"),
        "parent_pr": parent_pr,
        "title": activity.get("title", ""),
        "author": activity.get("author"),
        "date": activity.get("date"),
        "kanban_status": activity.get("kanban_status") or "",
        "url": activity.get("url")
    }


class ActivityExporter:
    """Exports an activity feed to JSON and CSV files"""

    def __init__(self, owner: str, repo: str, output_dir: Path = EXPORTS_DIR):
        self.output_dir = Path(output_dir) / owner
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.owner = owner
        self.repo = repo

    def _filename(self, extension: str) -> Path:
        timestamp = datetime.now().strftime("%Y-%m-%d")
        return self.output_dir / f"{self.repo}_activity_{timestamp}.{extension}"

    def export_json(self, activities: list) -> str:
        """
        Export the grouped activity tree to JSON

        Returns:
            Path to exported file
        """
        filename = self._filename("json")

        data = {
            "exported_at": datetime.now().isoformat(),
            "repository": f"{self.owner}/{self.repo}",
            "activities": activities
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

        print(f"Exported JSON to {filename}")
        return str(filename)

    def export_csv(self, activities: list) -> str:
        """
        Export activities to CSV, one row per activity

        Returns:
            Path to exported file
        """
        filename = self._filename("csv")

        with open(filename, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            writer.writerows(flatten_activities(activities))

        print(f"Exported CSV to {filename}")
        return str(filename)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Export GitHub repository activity")
    parser.add_argument("--owner", required=True, help="Repository owner")
    parser.add_argument("--repo", required=True, help="Repository name")
    parser.add_argument("--type", choices=TYPE_FILTERS, default=DEFAULT_TYPE_FILTER,
                        help="Activity type filter")
    parser.add_argument("--sort", choices=SORT_ORDERS, default=DEFAULT_SORT_ORDER,
                        help="Sort order by date")
    parser.add_argument("--format", choices=["json", "csv", "both"], default="both",
                        help="Export format")
    parser.add_argument("--output-dir", default=str(EXPORTS_DIR), help="Export directory")
    args = parser.parse_args(argv)

    token = os.getenv("GITHUB_TOKEN")

    if not token:
        raise ValueError("GITHUB_TOKEN environment variable not set")

    configure_logging()

    session = ActivitySession()
    session.load(args.owner, args.repo, token)
    session.set_filter(args.type)
    session.set_sort(args.sort)
    activities = session.view()
    print(f"Loaded {len(session.activities)} activities, exporting {len(activities)}")

    exporter = ActivityExporter(args.owner, args.repo, args.output_dir)
    exported = []
    if args.format in ["json", "both"]:
        exported.append(exporter.export_json(activities))
    if args.format in ["csv", "both"]:
        exported.append(exporter.export_csv(activities))

    return exported


if __name__ == "__main__":
    main()
