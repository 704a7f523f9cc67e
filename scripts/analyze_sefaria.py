from __future__ import annotations

import argparse
import json
import sys
import urllib.error
import urllib.parse
import urllib.request
from typing import Iterator

SEFARIA_TEXTS_URL = "https://www.sefaria.org/api/texts/{ref}?lang=he&context=0"


def _fetch_json(url: str, body: dict | None = None, timeout: int = 60) -> dict:
    """GET `url`, or POST `body` to it as JSON, and decode the JSON reply."""
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    if body is not None:
        request.data = json.dumps(body, ensure_ascii=False).encode("utf-8")
        request.add_header("Content-Type", "application/json")
    with urllib.request.urlopen(request, timeout=timeout) as reply:
        payload = reply.read().decode("utf-8")
    return json.loads(payload) if payload else {}


def _verses(he) -> Iterator[str]:
    """Sefaria's `he` is a string, or lists of them nested by chapter and verse."""
    if isinstance(he, list):
        for part in he:
            yield from _verses(part)
    elif he:
        yield str(he)


def main() -> int:
    parser = argparse.ArgumentParser(description="Analyze a Sefaria text with the Aleph Code API.")
    parser.add_argument("--ref", required=True, help="Sefaria ref, such as Genesis.1 or Berakhot.2a")
    parser.add_argument("--mode", default="aleph-zero", choices=["aleph-zero", "aleph-one"])
    parser.add_argument("--base-url", default="http://127.0.0.1:5000", help="Aleph Code API base URL")
    parser.add_argument("--top", type=int, default=10, help="How many of the most frequent words to print")
    args = parser.parse_args()

    ref = args.ref
    api_url = args.base_url.rstrip("/")

    try:
        sefaria = _fetch_json(SEFARIA_TEXTS_URL.format(ref=urllib.parse.quote(ref)))
    except urllib.error.URLError as e:
        print(f"ERROR fetching '{ref}' from Sefaria: {e}", file=sys.stderr)
        return 2
    text = "\n".join(_verses(sefaria.get("he")))
    if not text.strip():
        print(f"No Hebrew text found for Sefaria ref '{ref}'.", file=sys.stderr)
        return 2

    try:
        response = _fetch_json(f"{api_url}/analyze", body={"requestId": 1, "text": text, "mode": args.mode})
    except urllib.error.HTTPError as e:
        detail = e.read().decode("utf-8", errors="replace")
        print(f"ERROR {e.code} from analysis API: {detail}", file=sys.stderr)
        return 2
    except urllib.error.URLError as e:
        print(f"ERROR reaching analysis API at {api_url}: {e}", file=sys.stderr)
        return 2

    if response.get("error"):
        print(f"Analysis failed: {response['error']}", file=sys.stderr)
        return 2

    results = response["results"]
    stats = results["stats"]
    grand = results["grandTotals"]
    print(f"'{ref}' ({args.mode}): {stats['totalLines']} lines, {stats['totalWords']} words, {stats['uniqueWords']} unique")
    print(f"Grand totals: units={grand['units']} tens={grand['tens']} hundreds={grand['hundreds']} dr={grand['dr']}")

    print(f"Prime line totals: {stats['primeLineTotals']} lines")
    for entry in results["primeSummary"]:
        print(f"  line {entry['line']}: {entry['value']} ({', '.join(entry['layers'])})")

    print("Digital roots:")
    for dr, count in enumerate(results["drDistribution"]):
        if count:
            print(f"  {dr}: {count}")

    counts = sorted(results["wordCounts"].items(), key=lambda kv: (-kv[1], kv[0]))
    print(f"Top {args.top} words:")
    for word, count in counts[: args.top]:
        print(f"  {word}: {count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
