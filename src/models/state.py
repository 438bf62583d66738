"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field

from .transpiler import TranspileResult


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the transpilation pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, utilitiesFile,
          outputSubdir, standalone
        - env_check: inputSourceFile, utilitiesSourceFile, htmlOutputdir, envOK
        - source_read: sourceText
        - utilities_load: registry
        - document_transpile: transpileResult
        - results_write: writeResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source document
        outputdir: Base output directory for generated files
        verbosity: Logging verbosity level (1-3)
        inputFile: Source document filename (relative to inputdir)
        utilitiesFile: Optional YAML utility table path
        outputSubdir: Subdirectory within outputdir for output
        standalone: Also write a full HTML page linking the stylesheet
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the source document
        utilitiesSourceFile: Resolved utility table path (None = packaged default)
        htmlOutputdir: Final output directory (outputdir + outputSubdir)
        sourceText: Raw source document text
        registry: UtilityClassRegistry built from the utility table
        transpileResult: HTML/CSS pair produced by the transpiler
        writeResult: Paths of written files and element/rule counts
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    utilitiesFile: Optional[str] = field(default=None)
    outputSubdir: str = field(default=".")
    standalone: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    utilitiesSourceFile: Optional[Path] = field(default=None)
    htmlOutputdir: Path = field(default=Path("/"))
    sourceText: Optional[str] = field(default=None)
    registry: Optional[Any] = field(default=None)  # UtilityClassRegistry at runtime
    transpileResult: Optional[TranspileResult] = field(default=None)
    writeResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, utilitiesFile, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for generated output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        # Only keep options that are ProgramState fields
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_read,
            utilities_load,
            document_transpile,
            results_write,
            results_report
        )

    reads left-to-right instead of the inside-out
    results_report(results_write(...(env_check(initial_state)))).
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
