"""Command-line interface for rendering invoices."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import InvoiceStyle, load_style
from .document import InvoiceDocument, load_items
from .errors import InvoiceError
from .layout_writer import write_layout
from .sample_data import generate_line_items, make_generators
from .styles import STYLE_PRESETS, get_style


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render itemized invoices to PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--input",
        type=Path,
        help="YAML or JSON file with invoice items (omit to render a synthetic sample)",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("out") / "invoice.pdf",
        help="Output PDF path",
    )
    parser.add_argument(
        "--style",
        type=Path,
        help="Path to YAML style file",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(STYLE_PRESETS),
        default="classic",
        help="Built-in style preset (ignored when --style is given)",
    )
    parser.add_argument(
        "--title",
        help="Document title (overrides the input file)",
    )
    parser.add_argument(
        "--num-items",
        type=int,
        default=8,
        help="Number of synthetic items when no --input is given",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for synthetic items",
    )
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Leave out lines that fail validation instead of stopping",
    )
    parser.add_argument(
        "--layout-out",
        type=Path,
        help="Write row layout metadata as JSONL",
    )
    parser.add_argument(
        "--write-style",
        type=Path,
        help="Write the effective style to a YAML file and exit",
    )
    return parser


def resolve_style(args: argparse.Namespace) -> InvoiceStyle:
    if args.style:
        return load_style(args.style)
    return get_style(args.preset)


def run(args: argparse.Namespace) -> int:
    style = resolve_style(args)

    if args.write_style:
        style.to_yaml(args.write_style)
        print(f"Style written to {args.write_style}")
        return 0

    if args.input:
        items, title = load_items(args.input)
        doc_id = args.input.stem
        print(f"Loaded {len(items)} items from {args.input}")
    else:
        rng, fake = make_generators(args.seed)
        items = generate_line_items(rng, fake, args.num_items)
        title = None
        doc_id = f"sample__{args.seed:05d}"
        print(f"Generated {len(items)} sample items (seed {args.seed})")

    document = InvoiceDocument(items, style=style, title=args.title or title or "Invoice")
    result = document.render(args.out, skip_invalid=args.skip_invalid)

    for idx, error in result.rejected:
        print(f"  Skipped line {idx}: {error}")

    if args.layout_out:
        written = write_layout(result.rows, args.layout_out, doc_id)
        print(f"  Layout: {written} rows written to {args.layout_out}")

    money = style.money
    print("\nRendering complete!")
    print(f"  PDF: {args.out}")
    print(f"  Rows: {len(result.rows)}")
    print(f"  Skipped: {len(result.rejected)}")
    print(f"  Total excl. tax: {money.format_money_decimal(result.totals.subtotal)}")
    print(f"  Tax: {money.format_money_decimal(result.totals.tax)}")
    print(f"  Total: {money.format_money_decimal(result.totals.paid_incl_vat)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except InvoiceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
