"""Headless batch inspector, CLI entry point.

Imports a calendar batch (JSON, CSV or Excel), prints the template variant
each page resolves to and optionally writes the normalised batch back out
as JSON.

Usage:
    python editor/src/headless.py <batch_file> [-o OUTPUT_JSON] [-m MODE] [-v]

Examples:
    python editor/src/headless.py examples/batch.json
    python editor/src/headless.py pages.xlsx -o normalised.json
    python editor/src/headless.py pages.csv --mode B
"""

import sys
import os
import argparse
import json
import logging

# Add editor/src to path so imports work
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)


def _describe(index, document, variant) -> str:
    quote = document.content.quote_cn
    if len(quote) > 24:
        quote = quote[:23] + '…'
    return f"  [{index}] {document.date_gregorian}  {variant.value}  {document.author.name_cn}  {quote}"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Inspect and normalise calendar page batches (headless).',
    )
    parser.add_argument(
        'input_file',
        help='Batch file: .json array of pages, or .csv / .xlsx / .xls with one page per row.',
    )
    parser.add_argument(
        '-o', '--output',
        default=None,
        help='Write the normalised batch to this JSON file.',
    )
    parser.add_argument(
        '-m', '--mode',
        default='Auto',
        choices=['Auto', 'A', 'B', 'C', 'D'],
        help='Template mode: Auto applies the selection rule, A-D pin a layout (default: Auto).',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    args = parser.parse_args(argv)

    # Logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    from services.batch_import import BatchImportError, load_batch_file
    from services.calendar_dates import lunar_python_converter
    from services.template_selector import TemplateMode, resolve_template

    input_path = os.path.abspath(args.input_file)
    if not os.path.isfile(input_path):
        print(f"Error: Input file not found: {input_path}")
        return 1

    print(f"Importing {input_path} ...")
    try:
        documents = load_batch_file(input_path, lunar_python_converter)
    except BatchImportError as e:
        print(f"Error: {e}")
        return 1

    mode = TemplateMode(args.mode)
    print(f"Found {len(documents)} page(s).")
    for index, document in enumerate(documents):
        print(_describe(index, document, resolve_template(document, mode)))

    if args.output:
        output_path = os.path.abspath(args.output)
        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump([document.to_dict() for document in documents], f, ensure_ascii=False, indent=2)
        except OSError as e:
            print(f"Error: Cannot write {output_path}: {e}")
            return 1
        print(f"\nDone. Wrote {len(documents)} page(s) to {output_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
