"""Generate a random closed poll as a JSON export.

Option labels come from faker with a fixed seed, and each ballot ranks a
random, non-empty subset of the options. The output can be fed to the
results API or to rankedpoll.results.analyze_export.

Usage:
    python scripts/generate_poll.py
    python scripts/generate_poll.py --options 5 --ballots 200 -o poll.json
"""

import argparse
import json
import random
from pathlib import Path

from faker import Faker

DEFAULT_OUTPUT = Path("poll-export.json")

SEED = 20260201
DEFAULT_OPTIONS = 4
DEFAULT_BALLOTS = 25


def generate_labels(count: int, fake: Faker) -> list[str]:
    """Generate ``count`` distinct option labels."""
    labels: list[str] = []
    while len(labels) < count:
        label = fake.unique.catch_phrase()
        if len(label) <= 200:
            labels.append(label)
    return labels


def generate_rankings(option_ids: list[int], rng: random.Random) -> list[dict]:
    """Rank a random non-empty prefix of a shuffled option list."""
    order = option_ids[:]
    rng.shuffle(order)
    depth = rng.randint(1, len(order))
    return [
        {"optionId": option_id, "rank": rank}
        for rank, option_id in enumerate(order[:depth], start=1)
    ]


def generate_poll(num_options: int, num_ballots: int, seed: int) -> dict:
    """Build a poll export dict with options and ballots."""
    fake = Faker()
    Faker.seed(seed)
    rng = random.Random(seed)

    labels = generate_labels(num_options, fake)
    options = [
        {"id": i, "text": label, "order": i - 1}
        for i, label in enumerate(labels, start=1)
    ]
    option_ids = [o["id"] for o in options]

    return {
        "id": 1,
        "title": fake.sentence(nb_words=5).rstrip("."),
        "description": fake.paragraph(nb_sentences=2),
        "isPublished": True,
        "isClosed": True,
        "options": options,
        "ballots": [
            {"rankings": generate_rankings(option_ids, rng)}
            for _ in range(num_ballots)
        ],
    }


def main():
    parser = argparse.ArgumentParser(description=__doc__.split("\n")[0])
    parser.add_argument("--options", type=int, default=DEFAULT_OPTIONS,
                        help=f"Number of options (default: {DEFAULT_OPTIONS})")
    parser.add_argument("--ballots", type=int, default=DEFAULT_BALLOTS,
                        help=f"Number of ballots (default: {DEFAULT_BALLOTS})")
    parser.add_argument("--seed", type=int, default=SEED,
                        help=f"Random seed (default: {SEED})")
    parser.add_argument("-o", "--output", type=Path, default=DEFAULT_OUTPUT,
                        help=f"Output path (default: {DEFAULT_OUTPUT})")
    args = parser.parse_args()

    if args.options < 1:
        parser.error("--options must be at least 1")
    if args.ballots < 0:
        parser.error("--ballots must not be negative")

    poll = generate_poll(args.options, args.ballots, args.seed)
    args.output.write_text(json.dumps(poll, indent=2), encoding="utf-8")
    print(f"Wrote {len(poll['ballots'])} ballots over {len(poll['options'])} options "
          f"to {args.output}")


if __name__ == "__main__":
    main()
