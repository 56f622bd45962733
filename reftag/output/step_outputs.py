"""Step outputs for the calling workflow.

The runner reads ``name=value`` lines appended to the file named by
``GITHUB_OUTPUT``. Outside a runner the same lines are printed instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from reftag.core.result import Err, Ok, Result
from reftag.output.console import ConsoleProtocol
from reftag.tagger.model import MutationResult


@dataclass(frozen=True, slots=True)
class OutputWriteError:
    path: Path
    message: str


def outputs_for(result: MutationResult) -> dict[str, str]:
    tag = result.ref or ""
    return {
        "tag": tag,
        # Deprecated alias of ``tag``.
        "ref_name": tag,
        "latest": "true" if result.published_latest else "false",
    }


def write_outputs(
    path: Path | None,
    outputs: Mapping[str, str],
    console: ConsoleProtocol,
) -> Result[None, OutputWriteError]:
    lines = [f"{name}={value}" for name, value in outputs.items()]

    if path is None:
        for line in lines:
            console.print(line)
        return Ok(None)

    try:
        with path.open("a", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
    except OSError as e:
        return Err(OutputWriteError(path=path, message=str(e)))

    console.debug(f"wrote {len(lines)} outputs to {path}")
    return Ok(None)
