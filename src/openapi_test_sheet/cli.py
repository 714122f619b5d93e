"""CLI entry point for openapi-test-sheet."""

import logging
import sys
from pathlib import Path

import click

from openapi_test_sheet.config import DEFAULT_OUTPUT, ENV_PREFIX, INVALID_BODY_STRATEGIES, GeneratorSettings
from openapi_test_sheet.errors import SheetError
from openapi_test_sheet.generator.testcase import TestCaseGenerator
from openapi_test_sheet.parser.swagger import load_document, parse_operations
from openapi_test_sheet.writer.excel import ExcelWriter


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log parsing details to stderr.")
def main(verbose: bool):
    """OpenAPI Test Sheet: turn an OpenAPI document into an Excel test case workbook."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.argument("doc_path", type=click.Path(path_type=Path))
@click.argument("output", required=False, default=DEFAULT_OUTPUT, type=click.Path(path_type=Path))
@click.option("--seed", type=int, default=None, envvar=f"{ENV_PREFIX}SEED", help="Seed for the 400-case body fixtures.")
@click.option(
    "--invalid-body",
    default="random",
    envvar=f"{ENV_PREFIX}INVALID_BODY",
    type=click.Choice(INVALID_BODY_STRATEGIES),
    help="How required body fields are broken for 400 cases.",
)
@click.option(
    "--ref-depth",
    default=1,
    envvar=f"{ENV_PREFIX}REF_DEPTH",
    type=click.IntRange(min=1),
    help="How many $ref hops to follow into components.schemas.",
)
def run(doc_path: Path, output: Path, seed: int | None, invalid_body: str, ref_depth: int):
    """Convert DOC_PATH into an Excel workbook of test cases (default: api-test-cases.xlsx)."""
    settings = GeneratorSettings(seed=seed, invalid_body=invalid_body, ref_depth=ref_depth)

    click.echo(f"Converting OpenAPI file: {doc_path}")
    click.echo(f"Output will be saved to: {output}")

    try:
        doc = load_document(doc_path)
        operations = parse_operations(doc, ref_depth=settings.ref_depth)
        click.echo(f"Found {len(operations)} operations.")

        records = TestCaseGenerator(settings).generate(operations)
        click.echo(f"Generated {len(records)} test cases.")

        ExcelWriter().write(records, output)
    except SheetError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    click.echo(f"Excel file created successfully: {output}")
