#!/usr/bin/env python3
"""
SliceWrangler

This script reads the validated struct model produced by the Slice front-end (a JSON document)
and generates C# record structs with Slice1/Slice2 encode and decode code.

Usage:
    python slice_wrangler.py --input <model.json> --output <output_dir> [--output-name <name>] [--dump-model] [--verbose] [--help]

Arguments:
    --input, -i       : Path to the JSON model produced by the front-end
    --output, -o      : Directory where output files will be generated
    --output-name, -n : Base name for the output file when the model has a single module
                        (default: the C# namespace of each module)
    --dump-model      : Write a JSON dump of the loaded model to the output directory
    --verbose, -v     : Print debug information
    --help, -h        : Show this help message

Environment variables SW_INPUT_FILE, SW_OUTPUT_DIR, SW_OUTPUT_NAME and SW_VERBOSE
override the corresponding arguments.

Example:
    python slice_wrangler.py --input structs.json --output ./generated
    python slice_wrangler.py --input structs.json --output ./generated --output-name Structs
"""

import argparse
import os
import sys
from typing import Dict, Optional

from model_loader import load_model_file, ModelLoadError
from model_debug import pretty_print_model, model_to_string
from generators.csharp_struct_generator import CSharpStructGenerator

TRUTHY = ("1", "true", "yes", "on")


class SliceStructConverter:
    """
    Handles loading a struct model and writing the generated C# files.
    """

    def __init__(self, input_file: str, output_dir: str, output_name: Optional[str] = None, verbose: bool = False):
        """
        Initialize the converter with input file and output directory.

        Args:
            input_file: Path to the JSON model
            output_dir: Directory where output files will be generated
            output_name: Base name for a single-module output file (default: module namespace)
            verbose: Whether to print debug information (default: False)
        """
        self.input_file = input_file
        self.output_dir = output_dir
        self.output_name = output_name
        self.verbose = verbose
        self.model = None

    def load_input_file(self) -> bool:
        """
        Load and validate the input model.

        Returns:
            bool: True if loading was successful, False otherwise
        """
        try:
            self.model = load_model_file(self.input_file)
        except ModelLoadError as e:
            print(f"Error: {e}", file=sys.stderr)
            return False

        if self.verbose:
            print(f"[DEBUG] Loaded model:\n{model_to_string(self.model)}")
        return True

    def generate_csharp_output(self) -> Dict[str, str]:
        """
        Generate the C# files and write them to the output directory.

        Returns:
            dict: generated filename -> path written
        """
        if not self.model:
            raise RuntimeError("No struct model available. Load the input file first.")

        options = {"output_name": self.output_name} if self.output_name else {}
        generator = CSharpStructGenerator(self.model, options, verbose=self.verbose)
        files = generator.generate()

        os.makedirs(self.output_dir, exist_ok=True)
        written = {}
        for filename, content in files.items():
            path = os.path.join(self.output_dir, filename)
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            written[filename] = path
            if self.verbose:
                print(f"[DEBUG] Wrote {path}")
        return written

    def dump_model(self) -> str:
        return pretty_print_model(self.model, "model_debug_dump.json", out_dir=self.output_dir)


def parse_arguments(argv=None):
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="Generate C# record structs with Slice encoding code from a struct model",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument('--input', '-i', help='Path to the JSON model produced by the front-end')
    parser.add_argument('--output', '-o', help='Directory where output files will be generated')
    parser.add_argument('--output-name', '-n', help='Base name for a single-module output file')
    parser.add_argument('--dump-model', action='store_true', help='Write a JSON dump of the loaded model')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output for debugging')

    args = parser.parse_args(argv)

    # Override with environment variables if set
    args.input = os.environ.get('SW_INPUT_FILE', args.input)
    args.output = os.environ.get('SW_OUTPUT_DIR', args.output)
    args.output_name = os.environ.get('SW_OUTPUT_NAME', args.output_name)
    if 'SW_VERBOSE' in os.environ:
        args.verbose = os.environ['SW_VERBOSE'].strip().lower() in TRUTHY

    if not args.input:
        parser.error("the following arguments are required: --input/-i (or SW_INPUT_FILE)")
    if not args.output:
        parser.error("the following arguments are required: --output/-o (or SW_OUTPUT_DIR)")

    return args


def main(argv=None):
    """
    Main entry point of the script.
    """
    args = parse_arguments(argv)

    converter = SliceStructConverter(
        args.input,
        args.output,
        output_name=args.output_name,
        verbose=args.verbose,
    )

    if not converter.load_input_file():
        sys.exit(1)

    if args.dump_model:
        converter.dump_model()

    # GenerationInvariantError is not caught here: it aborts the run.
    written = converter.generate_csharp_output()

    print(f"Slice struct generation completed successfully ({len(written)} file(s)).")


if __name__ == '__main__':
    main()
