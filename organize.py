#!/usr/bin/env python
"""
Bookmark Organizer - AI-powered bookmark categorization and search

This script sorts browser bookmarks into a handful of categories using a chat
completion model (NVIDIA NIM by default, any OpenAI-compatible endpoint works).
It takes an exported HTML bookmark file from your browser and writes a new HTML
file with one folder per category, plus a JSON mapping you can search later.

Dependencies:
- beautifulsoup4
- openai (v1.0.0+)
- python-dotenv
- tqdm

Setup:
1. Install: pip install -e .
2. Create a .env file with your API key: NVIDIA_NIM_API_KEY=your_key_here

Usage:
python organize.py input_bookmarks.html output_organized.html
python organize.py output_organized_mapping.json --ask "python tutorials"
"""

import argparse
import collections
import json
import logging
import sys

from bookmark_ai import AIConfig, BookmarkAIError, analyze, ask
from bookmark_ai.bookmark_parser import load_bookmarks
from bookmark_ai.export import export_netscape, verify_bookmarks
from bookmark_ai.normalize import coerce_bookmarks, normalize_url

NOT_ANALYZED_FOLDER = "Not analyzed"

# ---------- helpers ----------------------------------------------------------

def dedupe(bookmarks):
    """Drop repeated URLs (lowercased, trailing slash ignored), keeping the first."""
    unique_bookmarks_map = {}
    for bookmark in bookmarks:
        norm_url = normalize_url(bookmark.url)
        if norm_url not in unique_bookmarks_map:
            unique_bookmarks_map[norm_url] = bookmark
    return list(unique_bookmarks_map.values())

def display_categories(result, max_links=3):
    """Print each category with its size and a few sample titles."""
    counts = collections.Counter(b.category for b in result.bookmarks)
    names = list(result.categories) + [c for c in counts if c not in result.categories]
    for i, name in enumerate(names):
        is_last = i == len(names) - 1
        members = [b for b in result.bookmarks if b.category == name]
        print(f"{'└── ' if is_last else '├── '}📁 {name} ({len(members)} bookmark{'s' if len(members) != 1 else ''})")
        prefix = '    ' if is_last else '│   '
        for j, b in enumerate(members[:max_links]):
            print(f"{prefix}{'└── ' if j == min(max_links, len(members)) - 1 else '├── '}{b.title[:60]}")
        if len(members) > max_links:
            print(f"{prefix}    ... and {len(members) - max_links} more")

def save_mapping(result, mapping_file):
    with open(mapping_file, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    print(f"Classification mapping saved to {mapping_file}")

def load_mapping(mapping_file):
    """Read categorized bookmarks back from a mapping file written by save_mapping."""
    with open(mapping_file, encoding='utf-8') as f:
        data = json.load(f)
    records = data.get("bookmarks") if isinstance(data, dict) else data
    return coerce_bookmarks(records, categorized=True)

def categorize(args, config):
    bookmarks = load_bookmarks(args.infile)
    print(f"\nFound {len(bookmarks)} raw bookmarks. Deduplicating...")
    unique = dedupe(bookmarks)
    print(f"Removed {len(bookmarks) - len(unique)} duplicate URLs. Processing {len(unique)} unique bookmarks.")

    if not unique:
        print("\n⚠️ No bookmarks found in the input file. Please check that it contains valid bookmarks.")
        return None, []

    if len(unique) > config.analyze_limit:
        print(f"Note: only the first {config.analyze_limit} bookmarks are sent for analysis; "
              f"{len(unique) - config.analyze_limit} will be kept in '{NOT_ANALYZED_FOLDER}'.")

    result = analyze(unique, config=config)
    return result, unique[config.analyze_limit:]

# ---------- CLI --------------------------------------------------------------

def build_parser():
    ap = argparse.ArgumentParser(description="AI bookmark organiser")
    ap.add_argument("infile", help="exported HTML from browser, or a mapping JSON from a previous run (with --ask)")
    ap.add_argument("outfile", nargs="?", help="new HTML to import")
    ap.add_argument("--ask", metavar="QUERY", help="Find the bookmarks relevant to QUERY")
    ap.add_argument("--model", help="Model to use (default: $BOOKMARK_AI_MODEL or meta/llama-3.1-70b-instruct)")
    ap.add_argument("--debug", action="store_true", help="Print detailed debugging information")
    return ap

def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)
    if not args.ask and not args.outfile:
        ap.error("outfile is required unless --ask is given")

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    config = AIConfig.from_env(model=args.model)

    try:
        if args.ask:
            if args.infile.endswith(".json"):
                categorized = load_mapping(args.infile)
            else:
                result, _ = categorize(args, config)
                categorized = result.bookmarks if result else []
            matches = ask(args.ask, categorized, config=config)
            print(f"\n=== {len(matches)} bookmark{'s' if len(matches) != 1 else ''} relevant to '{args.ask}' ===")
            for i, b in enumerate(matches, 1):
                print(f"{i}. [{b.category}] {b.title} - {b.url}")
            return 0

        result, skipped = categorize(args, config)
        if result is None:
            print("Exiting without creating output file.")
            return 1
    except BookmarkAIError as e:
        print(f"Error: {e}")
        return 1
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading {args.infile}: {e}")
        return 1

    print("\n=== Proposed Bookmark Organization ===")
    display_categories(result)

    export_netscape(result, args.outfile, extra={NOT_ANALYZED_FOLDER: skipped})
    verify_bookmarks(args.infile, args.outfile)
    save_mapping(result, args.outfile.replace(".html", "") + "_mapping.json")

    print(f"Complete! Organized bookmarks written to {args.outfile}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
