"""Error-structure header of the JAGS model definition file."""

from enum import Enum
from pathlib import Path
from typing import Union

from .errors import UnknownErrorStructureError

# The model writer records the error structure on line 8, e.g.
# "#   Error structure: Residual * Process"
ERROR_STRUCTURE_LINE = 8


class ErrorStructure(str, Enum):
    RESID = "resid"
    PROCESS = "process"
    MULT = "mult"


ERROR_STRUCTURE_LABELS = {
    "Residual only": ErrorStructure.RESID,
    "Process only (MixSIR, for N = 1)": ErrorStructure.PROCESS,
    "Residual * Process": ErrorStructure.MULT,
}


def parse_error_structure(line: str) -> ErrorStructure:
    fields = line.rstrip("\r\n").split(":")
    label = fields[1].strip() if len(fields) > 1 else ""
    try:
        return ERROR_STRUCTURE_LABELS[label]
    except KeyError:
        raise UnknownErrorStructureError(
            f"Unrecognized error structure '{label}'. Expected one of: "
            f"{', '.join(ERROR_STRUCTURE_LABELS)}.",
            context={"line": line.strip()},
        ) from None


def read_error_structure(model_filename: Union[str, Path]) -> ErrorStructure:
    """Read the error structure declared on line 8 of the model file."""
    with open(model_filename, "r", encoding="utf-8") as handle:
        for number, line in enumerate(handle, start=1):
            if number == ERROR_STRUCTURE_LINE:
                return parse_error_structure(line)
    raise UnknownErrorStructureError(
        f"Model file '{model_filename}' has fewer than {ERROR_STRUCTURE_LINE} lines; "
        "no error structure found."
    )
