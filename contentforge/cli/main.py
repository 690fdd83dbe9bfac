"""Command line interface for scheduled AI generation."""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.batch_store import BatchStore
from ..core.content_types import get_types
from ..core.content_generator import ContentGenerator
from ..core.formatting import EditorType
from ..core.posts import StorePostService
from ..core.scheduled_generator import ScheduledGenerator
from ..core.status import STATUS_FILTERS, BatchStatusQuery
from ..core.tasks import InMemoryDispatcher
from ..settings import AISettingsManager
from ..utils import JsonFileStore, set_log_level


TASKS_KEY = "cforge_tasks"


class ContentForgeCommands:
    """Command implementations over a state directory.

    Batches, settings, created posts and pending tasks are all kept in
    ``<state_dir>/state.json`` so that scheduling and working can happen in
    separate invocations.
    """

    def __init__(self, state_dir: str = "./.contentforge"):
        """Initialize commands with state directory."""
        self.state_dir = Path(state_dir)
        self.state_dir.mkdir(parents=True, exist_ok=True)

        self.store = JsonFileStore(str(self.state_dir / "state.json"))
        self.batch_store = BatchStore(self.store)
        self.settings = AISettingsManager(self.store)
        self.posts = StorePostService(self.store)
        self.dispatcher = InMemoryDispatcher()
        self.dispatcher.restore(self.store.get(TASKS_KEY) or [])
        self.generator = ScheduledGenerator(self.batch_store, self.dispatcher, self.posts, self.settings)
        self.query = BatchStatusQuery(self.batch_store)

    def _save_tasks(self) -> None:
        self.store.set(TASKS_KEY, self.dispatcher.snapshot())

    def generate(self, count: int, content_type: str, prompt: str = "", post_type: str = "post",
                 post_status: str = "draft", editor_type: str = EditorType.BLOCK.value,
                 user_id: int = 0) -> Dict[str, Any]:
        """Schedule a batch of AI generated posts.

        Returns:
            Schedule result as a dictionary
        """
        result = self.generator.schedule_generation({
            "post_number": count,
            "content_type": content_type,
            "ai_prompt": prompt,
            "post_type": post_type,
            "post_status": post_status,
            "editor_type": editor_type,
            "user_id": user_id,
        })
        self._save_tasks()
        return result.to_dict()

    def status(self, batch_id: str) -> Dict[str, Any]:
        return self.query.get(batch_id)

    def list(self, status: str = "all", limit: int = 10) -> Dict[str, Any]:
        return self.query.list_batches(status=status, limit=limit)

    def work(self, max_tasks: Optional[int] = None, wait: bool = False) -> int:
        """Run pending tasks.

        Args:
            max_tasks: Stop after this many tasks
            wait: Keep running until no generation task is left, sleeping
                until each one is due

        Returns:
            Number of tasks run
        """
        try:
            if not wait:
                return self.dispatcher.run_due(max_tasks=max_tasks)

            ran = 0
            while max_tasks is None or ran < max_tasks:
                upcoming = self.dispatcher.pending(hook=ScheduledGenerator.SEQUENTIAL_HOOK)
                if not upcoming:
                    break
                delay = upcoming[0].run_at - self.dispatcher.clock()
                if delay > 0:
                    time.sleep(delay)
                ran += self.dispatcher.run_due(max_tasks=None if max_tasks is None else max_tasks - ran)
            return ran
        finally:
            self._save_tasks()

    def save_settings(self, provider: str, model: str = "", api_key: str = "") -> Dict[str, Any]:
        self.settings.save_settings({"provider": provider, "model": model, "api_key": api_key})
        return self.show_settings()

    def show_settings(self) -> Dict[str, Any]:
        provider = self.settings.get_active_provider()
        return {
            "provider": provider,
            "model": self.settings.get_active_model(),
            "api_key": self.settings.get_masked_api_key(provider),
            "is_configured": self.settings.is_configured(),
        }

    def test_connection(self) -> Dict[str, Any]:
        generator = ContentGenerator.from_settings(self.settings)
        return generator.test_connection().to_dict()


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the contentforge CLI."""
    parser = argparse.ArgumentParser(
        description="Generate placeholder posts with AI, one post at a time",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Configure the provider
  contentforge settings --provider anthropic --model claude-sonnet-4-5-20250929 --api-key sk-ant-...

  # Schedule 5 technology posts
  contentforge generate --count 5 --content-type technology

  # Run the tasks that are due, waiting for the rest
  contentforge work --wait

  # Check progress
  contentforge status <batch_id>
  contentforge list --status processing
        """
    )

    parser.add_argument(
        "--state-dir",
        default="./.contentforge",
        help="Directory to store state (default: ./.contentforge)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    generate_parser = subparsers.add_parser("generate", help="Schedule a batch of AI posts")
    generate_parser.add_argument("--count", type=int, required=True, help="Number of posts to generate")
    generate_parser.add_argument("--content-type", required=True,
                                 help=f"Content type ({', '.join(get_types())})")
    generate_parser.add_argument("--prompt", default="", help="Additional instructions for the AI")
    generate_parser.add_argument("--post-type", default="post", help="Post type (default: post)")
    generate_parser.add_argument("--post-status", default="draft", help="Post status (default: draft)")
    generate_parser.add_argument("--editor", choices=[e.value for e in EditorType],
                                 default=EditorType.BLOCK.value, help="Editor format")
    generate_parser.add_argument("--user-id", type=int, default=0, help="Author of the created posts")

    # Status command
    status_parser = subparsers.add_parser("status", help="Show progress of a batch")
    status_parser.add_argument("batch_id", help="Batch ID")

    # List command
    list_parser = subparsers.add_parser("list", help="List batches")
    list_parser.add_argument("--status", choices=STATUS_FILTERS, default="all", help="Filter by status")
    list_parser.add_argument("--limit", type=int, default=10, help="Maximum batches to show (max 50)")
    list_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    # Work command
    work_parser = subparsers.add_parser("work", help="Run pending generation tasks")
    work_parser.add_argument("--max-tasks", type=int, help="Stop after this many tasks")
    work_parser.add_argument("--wait", action="store_true", help="Wait for remaining generation tasks to become due")

    # Settings command
    settings_parser = subparsers.add_parser("settings", help="Show or change AI settings")
    settings_parser.add_argument("--provider", help="AI provider (openai, anthropic, google)")
    settings_parser.add_argument("--model", default="", help="Model for the provider")
    settings_parser.add_argument("--api-key", default="", help="API key for the provider")

    # Test connection command
    subparsers.add_parser("test-connection", help="Check the configured API key")

    return parser


def _print_batch(batch: Dict[str, Any]) -> None:
    print(f"Batch {batch['batch_id']}: {batch['status']}")
    print(f"  Progress: {batch['completed']}/{batch['total']} ({batch['progress_percentage']}%)")
    print(f"  Pending: {batch['pending']}")

    if batch.get("posts_created"):
        print("\nPosts created:")
        for post in batch["posts_created"]:
            print(f"  {post['index'] + 1}. #{post['post_id']} {post['title']}")

    if batch.get("errors"):
        print("\nErrors:")
        for error in batch["errors"]:
            print(f"  {error['index'] + 1}. {error['error']}")


def main(argv=None):
    """Main entry point for the contentforge CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    if args.verbose:
        set_log_level("DEBUG")

    try:
        commands = ContentForgeCommands(state_dir=args.state_dir)

        if args.command == "generate":
            result = commands.generate(
                count=args.count,
                content_type=args.content_type,
                prompt=args.prompt,
                post_type=args.post_type,
                post_status=args.post_status,
                editor_type=args.editor,
                user_id=args.user_id,
            )
            print(result["message"])
            print(f"Batch ID: {result['batch_id']}")

        elif args.command == "status":
            _print_batch(commands.status(args.batch_id))

        elif args.command == "list":
            listing = commands.list(status=args.status, limit=args.limit)

            if args.format == "json":
                print(json.dumps(listing, indent=2))
            else:
                batches = listing["batches"]
                if not batches:
                    print("No batches found")
                    return

                print(f"{'Batch ID':<40} {'Status':<12} {'Progress':<12} {'Errors'}")
                print("-" * 75)

                for batch in batches:
                    progress = f"{batch['completed']}/{batch['total']}"
                    print(f"{batch['batch_id']:<40} {batch['status']:<12} {progress:<12} {batch['error_count']}")

        elif args.command == "work":
            ran = commands.work(max_tasks=args.max_tasks, wait=args.wait)
            print(f"Ran {ran} tasks, {len(commands.dispatcher.pending())} pending")

        elif args.command == "settings":
            if args.provider:
                settings = commands.save_settings(args.provider, args.model, args.api_key)
            else:
                settings = commands.show_settings()
            print(json.dumps(settings, indent=2))

        elif args.command == "test-connection":
            result = commands.test_connection()
            print(result["message"])
            if not result["success"]:
                sys.exit(1)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
