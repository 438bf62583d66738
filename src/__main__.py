#!/usr/bin/env python3
"""
tailmark - Utility-class markup transpiler

Transpiles a line-oriented markup document, annotated with utility-style
class names, into an HTML fragment and a stylesheet of scoped selectors.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Source format:
    # Heading 1 .{main-heading nav} #{main-heading}
        font-semibold 2rem text-red-500

    ## Subheading text-blue-500 italic

Output:
    index.html  - HTML fragment, one element per heading
    styles.css  - one scoped class rule per element
    page.html   - (with --standalone) full page linking styles.css

Usage:
    tailmark inputdir/ outputdir/ --inputFile doc.tm

Examples:
    # Basic transpilation with the packaged utility table
    tailmark . output/ --inputFile doc.tm

    # Custom utility table and a standalone preview page
    tailmark . output/ --inputFile doc.tm --utilitiesFile themes/dark.yaml --standalone

    # Verbose output
    tailmark . output/ --inputFile doc.tm -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from . import __version__
from .config import appsettings
from .lib import (
    UtilityClassRegistry,
    UtilityTableError,
    UnknownUtilityClass,
    MalformedLine,
    LineTranspiler,
    LOG,
    state_connectToLogger,
)
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _        _ _                      _
 | |_ __ _(_) |_ __ ___   __ _ _ __| | __
 | __/ _` | | | '_ ` _ \ / _` | '__| |/ /
 | || (_| | | | | | | | | (_| | |  |   <
  \__\__,_|_|_|_| |_| |_|\__,_|_|  |_|\_\

  Utility-class markup transpiler
"""

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <link rel="stylesheet" href="{stylesheet}">
</head>
<body>
{body}
</body>
</html>
"""

HTML_OUTPUT = "index.html"
CSS_OUTPUT = "styles.css"
PAGE_OUTPUT = "page.html"

# Define CLI arguments
parser = ArgumentParser(
    description="tailmark - transpile utility-class markup to HTML and scoped CSS",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input markup file (relative to inputdir)"
)

parser.add_argument(
    "--utilitiesFile",
    default=None,
    type=str,
    help="YAML utility table. Defaults to TAILMARK_UTILITIES_FILE or the packaged table",
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the generated files",
)

parser.add_argument(
    "--standalone",
    action="store_true",
    default=False,
    help="Also write a full HTML page that links the stylesheet",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the markup file
            - utilitiesSourceFile: Resolved utility table path (None = packaged)
            - htmlOutputdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        1 if the input file or utility table is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    # CLI option wins over the environment setting
    utilities = state.utilitiesFile or appsettings.utilities_file
    if utilities:
        utilities_path = Path(utilities)
        if not utilities_path.is_absolute() and not utilities_path.exists():
            utilities_path = state.inputdir / utilities
        if not utilities_path.is_file():
            print(f"Error: Utility table not found: {utilities}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.utilitiesSourceFile = utilities_path
        LOG(f"Utility table: {utilities_path}", level=2)
    else:
        LOG("Utility table: packaged default", level=2)

    state.htmlOutputdir = state.outputdir / state.outputSubdir
    state.htmlOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.htmlOutputdir}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the markup source file.

    Returns:
        ProgramState with added field:
            - sourceText: Raw document text

    Exits:
        1 if the file cannot be read or decoded
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    return state


def utilities_load(inputstate: ProgramState) -> ProgramState:
    """
    Build the utility class registry.

    Returns:
        ProgramState with added field:
            - registry: UtilityClassRegistry

    Exits:
        1 if the utility table is invalid
    """

    state = inputstate.copy()

    LOG("Loading utility table...", level=1)

    try:
        if state.utilitiesSourceFile is not None:
            state.registry = UtilityClassRegistry.fromYAML(state.utilitiesSourceFile)
        else:
            state.registry = UtilityClassRegistry.fromDefault()
    except UtilityTableError as e:
        print(f"Utility table error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Utility table '{state.registry.name}': {len(state.registry)} classes", level=2)
    return state


def document_transpile(inputstate: ProgramState) -> ProgramState:
    """
    Transpile the source text to an HTML fragment and scoped stylesheet.

    Returns:
        ProgramState with added field:
            - transpileResult: TranspileResult

    Exits:
        1 on an unknown utility class or a malformed line, reporting the
        failing line and token
    """

    state = inputstate.copy()

    LOG("Transpiling document...", level=1)

    if state.sourceText is None or state.registry is None:
        print("Error: No source or utility table available", file=sys.stderr)
        sys.exit(1)

    try:
        transpiler = LineTranspiler(state.registry)
        state.transpileResult = transpiler.transpile(state.sourceText)
    except UnknownUtilityClass as e:
        print(f"Transpile error in {state.inputFile}: {e}", file=sys.stderr)
        sys.exit(1)
    except MalformedLine as e:
        print(f"Parse error in {state.inputFile}: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Transpiled {len(state.transpileResult.rules)} elements", level=2)
    return state


def htmlPage_build(title: str, body: str) -> str:
    """Wrap an HTML fragment in a minimal document that links the stylesheet"""
    return PAGE_TEMPLATE.format(title=title, stylesheet=CSS_OUTPUT, body=body)


def results_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the HTML fragment and stylesheet (and optional page) to disk.

    Returns:
        ProgramState with added field:
            - writeResult: Dict with html_file, css_file, page_file, element_count

    Exits:
        1 if there is no result or a file cannot be written
    """

    state = inputstate.copy()

    if state.transpileResult is None:
        print("Error: Transpilation failed", file=sys.stderr)
        sys.exit(1)

    result = state.transpileResult
    html_file = state.htmlOutputdir / HTML_OUTPUT
    css_file = state.htmlOutputdir / CSS_OUTPUT
    page_file = None

    try:
        html_file.write_text(result.html, encoding="utf-8")
        LOG(f"Wrote {html_file}", level=2)
        css_file.write_text(result.css, encoding="utf-8")
        LOG(f"Wrote {css_file}", level=2)

        if state.standalone:
            page_file = state.htmlOutputdir / PAGE_OUTPUT
            page_file.write_text(
                htmlPage_build(state.inputSourceFile.stem, result.html), encoding="utf-8"
            )
            LOG(f"Wrote {page_file}", level=2)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        sys.exit(1)

    state.writeResult = {
        "html_file": str(html_file),
        "css_file": str(css_file),
        "page_file": str(page_file) if page_file else None,
        "element_count": len(result.rules),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the written files.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if writeResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.writeResult:
        print("Error: Nothing was written", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Transpilation successful!", level=1)
    LOG(f"  HTML:     {state.writeResult['html_file']}", level=1)
    LOG(f"  CSS:      {state.writeResult['css_file']}", level=1)
    if state.writeResult["page_file"]:
        LOG(f"  Page:     {state.writeResult['page_file']}", level=1)
    LOG(f"  Elements: {state.writeResult['element_count']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="tailmark - Utility-class markup transpiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - transpile a markup document to HTML and scoped CSS.

    Orchestrates the pipeline:
        1. env_check: Validate paths and environment
        2. source_read: Read the markup file
        3. utilities_load: Build the utility class registry
        4. document_transpile: Produce the HTML/CSS pair
        5. results_write: Write index.html, styles.css (and page.html)
        6. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(
        state,
        env_check,
        source_read,
        utilities_load,
        document_transpile,
        results_write,
        results_report,
    )


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
