"""
Note Agent - Main Entry Point
Runs one chat turn against a note file and prints the resulting action
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from config.settings import settings
from note_agent.errors import NoteAgentError
from note_agent.models.chat_models import ConversationMessage
from note_agent.models.note_models import dump_note, parse_note
from note_agent.runtime import NoteAgentRuntime
from note_agent.utils.note_editing import apply_action, describe_action


class CleanFormatter(logging.Formatter):
    """Formatter that strips trailing newlines from log messages"""

    def format(self, record):
        message = super().format(record)
        return message.rstrip()


# Configure logging with clean formatter
formatter = CleanFormatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[console_handler],
    force=True  # Override any existing configuration
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ask the note agent about a note")
    parser.add_argument("note", type=Path, help="Path to the note JSON file")
    parser.add_argument("message", help="User message for the agent")
    parser.add_argument("--cursor", type=int, default=None,
                        help="Cursor position among top-level nodes (default: end of note)")
    parser.add_argument("--api-key", default=None, help="Completion API key / JWT (default: from settings)")
    parser.add_argument("--apply", action="store_true", help="Also print the note with the action applied")
    return parser


async def run_turn(args: argparse.Namespace) -> int:
    """Run a single conversation turn through the agent runtime"""
    note = parse_note(args.note.read_text(encoding="utf-8"))
    cursor = len(note.children) if args.cursor is None else args.cursor

    runtime = NoteAgentRuntime(api_key=args.api_key)
    runtime.start()
    try:
        action = await runtime.chat(
            [ConversationMessage(role="user", content=args.message)],
            cursor_position=cursor,
            note=note,
        )
    finally:
        await runtime.stop()

    logger.info(describe_action(action))
    output = {"action": action.model_dump()}
    if args.apply:
        output["note"] = dump_note(apply_action(note, action))
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == '__main__':
    arguments = build_parser().parse_args()
    try:
        sys.exit(asyncio.run(run_turn(arguments)))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except NoteAgentError as e:
        logger.error(f"❌ {e.error_type}: {e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"❌ Cannot read note: {e}")
        sys.exit(1)
