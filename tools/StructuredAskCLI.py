#!/usr/bin/env python3
"""
CLI for asking a model a question and getting a schema-validated JSON answer.

Fields of the success shape are given as NAME:KIND[:DESCRIPTION], for example:

    python tools/StructuredAskCLI.py "Who wrote Dune?" \
        --field author:string:"Full name of the author" \
        --field year:integer --confirm 2 --out-of 3

The endpoint is read from STRUCTURED_API_BASE_URL / STRUCTURED_API_KEY.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import anyio
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax

from com_blockether_structured.chat import (
    ChatCore,
    ConfirmationFailure,
    ExtractionExhausted,
    VerbosityLevel,
)
from com_blockether_structured.schema import ComposedSchema, FieldDescriptor, FieldKind, SchemaCore
from com_blockether_structured.utils import OpenAIConversation

console = Console()


def parse_field(text: str) -> FieldDescriptor:
    """Parse NAME:KIND[:DESCRIPTION] into a field descriptor."""
    parts = text.split(":", 2)
    if len(parts) < 2:
        raise argparse.ArgumentTypeError(f"Expected NAME:KIND[:DESCRIPTION], got '{text}'")
    name, kind = parts[0], parts[1]
    description = parts[2] if len(parts) == 3 else None
    try:
        field_kind = FieldKind(kind)
    except ValueError:
        valid = ", ".join(k.value for k in FieldKind)
        raise argparse.ArgumentTypeError(f"Unknown kind '{kind}' (expected one of: {valid})")
    if field_kind == FieldKind.OBJECT:
        raise argparse.ArgumentTypeError(f"Field '{name}': object fields cannot be declared on the command line")
    if field_kind == FieldKind.ARRAY:
        return SchemaCore.array(name, of=FieldKind.STRING, description=description)
    return FieldDescriptor(name=name, kind=field_kind, description=description)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ask for a schema-validated JSON answer")
    parser.add_argument("question", help="The request sent to the model")
    parser.add_argument("--field", action="append", type=parse_field, default=[], help="NAME:KIND[:DESCRIPTION]")
    parser.add_argument("--model", default="gpt-4o", help="Model name (default: gpt-4o)")
    parser.add_argument("--system", action="append", default=[], help="System prompt (repeatable)")
    parser.add_argument("--confirm", type=int, default=1, help="Matching answers required")
    parser.add_argument("--out-of", type=int, default=1, help="Maximum consensus rounds")
    parser.add_argument("--refine", type=int, default=0, help="Run N refinement rounds instead of consensus")
    parser.add_argument("--project", default=None, help="Project name for log lines")
    parser.add_argument("--verbose", action="store_true", help="Log every attempt and vote distribution")
    return parser


async def run(args: argparse.Namespace) -> int:
    schema: Optional[ComposedSchema] = SchemaCore.result(*args.field) if args.field else None
    settings = ChatCore.settings(
        project=args.project,
        verbosity=VerbosityLevel.VERBOSE if args.verbose else VerbosityLevel.NORMAL,
    )
    chat = ChatCore.chat(OpenAIConversation(model=args.model, system_prompts=args.system), settings)

    if schema is not None:
        console.print(Panel(Syntax(json.dumps(schema.to_json_schema(), indent=2), "json"), title="Schema"))

    try:
        if args.refine > 0:
            answer = await chat.refine(args.question, schema, times=args.refine)
        else:
            answer = await chat.get(args.question, schema, confirm=args.confirm, out_of=args.out_of)
    except ConfirmationFailure as e:
        console.print(f"[red]✗ No answer confirmed ({e.confirm_count} matching required)[/red]")
        for i, candidate in enumerate(e.distinct_answers, 1):
            console.print(Panel(Syntax(json.dumps(candidate, indent=2), "json"), title=f"Candidate {i}"))
        return 2
    except ExtractionExhausted as e:
        console.print(f"[red]✗ {e.message}[/red]")
        return 1

    console.print(Panel(Syntax(json.dumps(answer, indent=2), "json"), title="[green]Answer[/green]"))
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        exit_code = anyio.run(run, args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
