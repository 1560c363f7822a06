# scripts/parse_queries.py

import os
import sys

this_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(this_dir)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from src.compiler.pattern_table import SAMPLE_QUERIES
from src.service.filter_search_service import FilterSearchService
from src.utils.formatting import format_fragments, format_patch


def main():
    queries = sys.argv[1:] or SAMPLE_QUERIES

    print("[INFO] Initializing FilterSearchService ...")

    for i, query in enumerate(queries, start=1):
        print("=" * 80)
        print(f"[TEST {i}] Query: {query}\n")

        service = FilterSearchService()
        try:
            chips = service.parse(query)
            patch = service.build_patch()
        except Exception as e:
            print(f"[ERROR] Parsing failed: {e}")
            continue

        print("Detected filters:")
        print(format_fragments(chips))
        print("")
        print("Filter patch:")
        print(format_patch(patch))
        print("")

    print("=" * 80)
    print("[INFO] Parse run finished.")


if __name__ == "__main__":
    main()
