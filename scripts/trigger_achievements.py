"""CLI script to manually trigger achievement evaluation and wager settlement."""
from __future__ import annotations

import argparse

from studyquest.tasks.achievements import evaluate_user_achievements
from studyquest.tasks.wagers import resolve_user_wagers


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Manually evaluate achievements and settle wagers for a user",
    )
    parser.add_argument(
        "--user-id",
        type=str,
        required=True,
        help="User whose achievements and wagers should be processed",
    )
    parser.add_argument(
        "--async",
        action="store_true",
        dest="use_async",
        help="Queue tasks asynchronously instead of running immediately",
    )
    parser.add_argument(
        "--skip-wagers",
        action="store_true",
        help="Only evaluate achievements",
    )

    args = parser.parse_args()

    tasks = [evaluate_user_achievements]
    if not args.skip_wagers:
        tasks.append(resolve_user_wagers)

    for task in tasks:
        print(f"Running {task.name} for user {args.user_id}")
        if args.use_async:
            queued = task.apply_async(args=(args.user_id,))
            print(f"Task queued: {queued.id}")
        else:
            result = task.run(args.user_id)
            print(f"Result: {result}")


if __name__ == "__main__":
    main()
